"""Label provider: renders label keys as display text.

The core only ever hands out label keys (``case.investigation``); this
module is the default renderer the API uses when filling
``status_label``.  Front-ends with their own translation bundles can
ignore the rendered text and use the key.
"""

from __future__ import annotations

from typing import Final, Protocol

from src.models.enums import LanguageCode

_EN: Final[dict[str, str]] = {
    "case.registered": "Registered",
    "case.investigation": "Under Investigation",
    "case.trial": "In Trial",
    "case.closed": "Closed",
    "case.pcr": "PCR Act",
    "case.poa": "PoA Act",
    "case.marriage": "Inter-caste Marriage",
    "disbursement.sanctioned": "Sanctioned",
    "disbursement.processing": "Processing",
    "disbursement.disbursed": "Disbursed",
    "disbursement.failed": "Failed",
    "relief.immediate_relief": "Immediate Relief",
    "relief.rehabilitation": "Rehabilitation",
    "relief.marriage_incentive": "Marriage Incentive",
    "grievance.open": "Open",
    "grievance.in_progress": "In Progress",
    "grievance.resolved": "Resolved",
    "grievance.closed": "Closed",
    "grievance.delay": "Delay in Disbursement",
    "grievance.wrong_amount": "Wrong Amount",
    "grievance.not_received": "Amount Not Received",
    "grievance.documentation": "Documentation Issue",
    "grievance.other": "Other",
    "victim.pending": "Verification Pending",
    "victim.verified": "Verified",
    "victim.rejected": "Verification Rejected",
    "status.unknown": "Unknown",
}

_HI: Final[dict[str, str]] = {
    "case.registered": "पंजीकृत",
    "case.investigation": "जांच जारी",
    "case.trial": "विचाराधीन",
    "case.closed": "बंद",
    "case.pcr": "पीसीआर अधिनियम",
    "case.poa": "पीओए अधिनियम",
    "case.marriage": "अंतर्जातीय विवाह",
    "disbursement.sanctioned": "स्वीकृत",
    "disbursement.processing": "प्रक्रिया में",
    "disbursement.disbursed": "वितरित",
    "disbursement.failed": "विफल",
    "relief.immediate_relief": "तत्काल राहत",
    "relief.rehabilitation": "पुनर्वास",
    "relief.marriage_incentive": "विवाह प्रोत्साहन",
    "grievance.open": "खुली",
    "grievance.in_progress": "प्रगति पर",
    "grievance.resolved": "हल हो गई",
    "grievance.closed": "बंद",
    "grievance.delay": "भुगतान में देरी",
    "grievance.wrong_amount": "गलत राशि",
    "grievance.not_received": "राशि प्राप्त नहीं हुई",
    "grievance.documentation": "दस्तावेज़ संबंधी समस्या",
    "grievance.other": "अन्य",
    "victim.pending": "सत्यापन लंबित",
    "victim.verified": "सत्यापित",
    "victim.rejected": "सत्यापन अस्वीकृत",
    "status.unknown": "अज्ञात",
}


class LabelProvider(Protocol):
    def render(self, key: str, language: str = LanguageCode.en) -> str: ...


class StaticLabelProvider:
    """Dictionary-backed provider.  Missing keys fall back to English, then the key."""

    __slots__ = ("_tables",)

    def __init__(self, tables: dict[str, dict[str, str]] | None = None) -> None:
        self._tables = tables if tables is not None else {LanguageCode.en: _EN, LanguageCode.hi: _HI}

    def render(self, key: str, language: str = LanguageCode.en) -> str:
        table = self._tables.get(language, {})
        if key in table:
            return table[key]
        return self._tables.get(LanguageCode.en, {}).get(key, key)
