"""Demo data for the in-memory entity store.

Loaded once at startup when no Supabase project is configured and
``NYAYADHAAR_SEED_DEMO_DATA`` is on.  Ids are fixed so that the demo
profiles can be used directly as ``X-Profile-Id`` values.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from src.models.entities import Case, Disbursement, Grievance, Profile, Victim
from src.models.enums import (
    CaseStatus,
    CaseType,
    CasteCategory,
    DisbursementStatus,
    EntityType,
    GrievancePriority,
    GrievanceStatus,
    GrievanceType,
    LanguageCode,
    ReliefType,
    Role,
    VerificationStatus,
)
from src.services.store.base import PROFILES_TABLE, table_for

if TYPE_CHECKING:
    from src.services.store.base import EntityStore

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Fixed ids
# ---------------------------------------------------------------------------

ADMIN_ID = "00000000-0000-4000-8000-000000000001"
DISTRICT_OFFICER_ID = "00000000-0000-4000-8000-000000000002"
USER_WITH_VICTIM_ID = "00000000-0000-4000-8000-000000000003"
OTHER_USER_ID = "00000000-0000-4000-8000-000000000004"
USER_WITHOUT_VICTIM_ID = "00000000-0000-4000-8000-000000000005"

VICTIM_ID = "10000000-0000-4000-8000-000000000001"
OTHER_VICTIM_ID = "10000000-0000-4000-8000-000000000002"

_BASE_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)


def _at(days: int) -> datetime:
    return _BASE_TIME + timedelta(days=days)


def demo_records() -> dict[str, list[BaseModel]]:
    """Demo rows keyed by table name."""
    profiles: list[BaseModel] = [
        Profile(
            id=ADMIN_ID,
            email="admin@nyayadhaar.gov.in",
            full_name="Kavita Sharma",
            role=Role.ADMIN,
            state="Madhya Pradesh",
        ),
        Profile(
            id=DISTRICT_OFFICER_ID,
            email="dso.bhopal@nyayadhaar.gov.in",
            full_name="Rajesh Verma",
            role=Role.DISTRICT_OFFICER,
            state="Madhya Pradesh",
            district="Bhopal",
        ),
        Profile(
            id=USER_WITH_VICTIM_ID,
            email="asha.devi@example.in",
            full_name="Asha Devi",
            phone="9876543210",
            state="Madhya Pradesh",
            district="Bhopal",
            language_preference=LanguageCode.hi,
        ),
        Profile(
            id=OTHER_USER_ID,
            email="meena.kumari@example.in",
            full_name="Meena Kumari",
            state="Madhya Pradesh",
            district="Sehore",
        ),
        Profile(
            id=USER_WITHOUT_VICTIM_ID,
            email="ravi.das@example.in",
            full_name="Ravi Das",
            state="Madhya Pradesh",
            district="Vidisha",
        ),
    ]

    victims: list[BaseModel] = [
        Victim(
            id=VICTIM_ID,
            user_id=USER_WITH_VICTIM_ID,
            victim_name="Asha Devi",
            aadhaar_number="234567890123",
            phone="9876543210",
            address="Ward 12, Berasia Road",
            state="Madhya Pradesh",
            district="Bhopal",
            caste_category=CasteCategory.SC,
            verification_status=VerificationStatus.VERIFIED,
            digilocker_verified=True,
            verified_by=DISTRICT_OFFICER_ID,
            verified_at=_at(2),
            created_at=_at(0),
        ),
        Victim(
            id=OTHER_VICTIM_ID,
            user_id=OTHER_USER_ID,
            victim_name="Meena Kumari",
            aadhaar_number="345678901234",
            phone="9123456780",
            address="Village Ichhawar",
            state="Madhya Pradesh",
            district="Sehore",
            caste_category=CasteCategory.ST,
            verification_status=VerificationStatus.PENDING,
            created_at=_at(5),
        ),
    ]

    cases: list[BaseModel] = [
        Case(
            id="20000000-0000-4000-8000-000000000001",
            case_number="POA/2024/0001",
            victim_id=VICTIM_ID,
            case_type=CaseType.POA,
            incident_date=date(2024, 1, 10),
            incident_description="Denial of access to the village well and verbal abuse.",
            fir_number="FIR/BPL/2024/118",
            police_station="Berasia",
            case_status=CaseStatus.UNDER_INVESTIGATION,
            cctns_reference="CCTNS-MP-2024-118",
            created_at=_at(1),
            updated_at=_at(3),
        ),
        Case(
            id="20000000-0000-4000-8000-000000000002",
            case_number="ICM/2024/0002",
            victim_id=VICTIM_ID,
            case_type=CaseType.INTER_CASTE_MARRIAGE,
            incident_description="Application under the inter-caste marriage incentive scheme.",
            case_status=CaseStatus.REGISTERED,
            created_at=_at(10),
            updated_at=_at(10),
        ),
        Case(
            id="20000000-0000-4000-8000-000000000003",
            case_number="PCR/2024/0003",
            victim_id=OTHER_VICTIM_ID,
            case_type=CaseType.PCR,
            incident_date=date(2024, 1, 18),
            incident_description="Refusal of entry to a public temple.",
            fir_number="FIR/SHR/2024/042",
            police_station="Ichhawar",
            court_name="Special Court, Sehore",
            case_status=CaseStatus.IN_TRIAL,
            ecourt_reference="MPSH010004562024",
            created_at=_at(6),
            updated_at=_at(20),
        ),
    ]

    disbursements: list[BaseModel] = [
        Disbursement(
            id="30000000-0000-4000-8000-000000000001",
            disbursement_number="DBT/2024/0001",
            case_id="20000000-0000-4000-8000-000000000001",
            victim_id=VICTIM_ID,
            relief_type=ReliefType.IMMEDIATE_RELIEF,
            sanction_amount=Decimal("100000.00"),
            sanctioned_by=DISTRICT_OFFICER_ID,
            sanction_date=date(2024, 1, 20),
            sanction_order_number="SO/BPL/2024/77",
            disbursement_status=DisbursementStatus.DISBURSED,
            disbursed_amount=Decimal("100000.00"),
            disbursement_date=date(2024, 1, 25),
            transaction_id="PFMS2024012500123",
            bank_account_number="123456789012",
            ifsc_code="SBIN0001234",
            beneficiary_name="Asha Devi",
            created_at=_at(5),
            updated_at=_at(10),
        ),
        Disbursement(
            id="30000000-0000-4000-8000-000000000002",
            disbursement_number="DBT/2024/0002",
            case_id="20000000-0000-4000-8000-000000000001",
            victim_id=VICTIM_ID,
            relief_type=ReliefType.REHABILITATION,
            sanction_amount=Decimal("250000.00"),
            sanctioned_by=DISTRICT_OFFICER_ID,
            sanction_date=date(2024, 2, 1),
            disbursement_status=DisbursementStatus.PROCESSING,
            bank_account_number="123456789012",
            ifsc_code="SBIN0001234",
            beneficiary_name="Asha Devi",
            created_at=_at(17),
            updated_at=_at(18),
        ),
        Disbursement(
            id="30000000-0000-4000-8000-000000000003",
            disbursement_number="DBT/2024/0003",
            case_id="20000000-0000-4000-8000-000000000003",
            victim_id=OTHER_VICTIM_ID,
            relief_type=ReliefType.IMMEDIATE_RELIEF,
            sanction_amount=Decimal("85000.00"),
            sanctioned_by=ADMIN_ID,
            sanction_date=date(2024, 1, 25),
            disbursement_status=DisbursementStatus.SANCTIONED,
            beneficiary_name="Meena Kumari",
            created_at=_at(10),
            updated_at=_at(10),
        ),
    ]

    grievances: list[BaseModel] = [
        Grievance(
            id="40000000-0000-4000-8000-000000000001",
            grievance_number="GRV/2024/0001",
            user_id=USER_WITH_VICTIM_ID,
            related_disbursement_id="30000000-0000-4000-8000-000000000002",
            grievance_type=GrievanceType.DELAY,
            description="Rehabilitation amount sanctioned two weeks ago is still processing.",
            priority=GrievancePriority.HIGH,
            status=GrievanceStatus.OPEN,
            created_at=_at(30),
            updated_at=_at(30),
        ),
        Grievance(
            id="40000000-0000-4000-8000-000000000002",
            grievance_number="GRV/2024/0002",
            user_id=OTHER_USER_ID,
            grievance_type=GrievanceType.DOCUMENTATION,
            description="Caste certificate upload keeps failing on DigiLocker.",
            priority=GrievancePriority.MEDIUM,
            status=GrievanceStatus.IN_PROGRESS,
            assigned_to=DISTRICT_OFFICER_ID,
            created_at=_at(12),
            updated_at=_at(14),
        ),
    ]

    return {
        PROFILES_TABLE: profiles,
        table_for(EntityType.VICTIM): victims,
        table_for(EntityType.CASE): cases,
        table_for(EntityType.DISBURSEMENT): disbursements,
        table_for(EntityType.GRIEVANCE): grievances,
    }


async def seed_demo_data(store: EntityStore) -> int:
    """Insert :func:`demo_records` into *store*; returns the row count."""
    inserted = 0
    for table, records in demo_records().items():
        for record in records:
            await store.insert(table, record.model_dump(mode="json"))
            inserted += 1
    logger.info("seed.demo_data_loaded", rows=inserted)
    return inserted
