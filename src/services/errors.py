"""Domain exceptions for NyayAdhaar.

Services raise these; the API layer maps them onto HTTP status codes.
Transition requests never let them escape: :class:`CaseTrackingService`
folds them into a :class:`~src.models.response.TransitionResult`.
"""

from __future__ import annotations


class NyayAdhaarError(Exception):
    """Base class for all domain errors."""


class UnknownStatus(NyayAdhaarError):
    """A status value outside the defined set for its entity type.

    Always a data-integrity defect, never a user error.
    """

    def __init__(self, entity_type: str, status: str) -> None:
        self.entity_type = entity_type
        self.status = status
        super().__init__(f"Unknown {entity_type} status '{status}'")


class IllegalTransition(NyayAdhaarError):
    """Transition not allowed for this role, or breaks a business rule."""

    def __init__(self, entity_type: str, from_status: str, to_status: str, role: str, reason: str = "") -> None:
        self.entity_type = entity_type
        self.from_status = from_status
        self.to_status = to_status
        self.role = role
        detail = f"{entity_type} cannot move from '{from_status}' to '{to_status}' as {role}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class NotFound(NyayAdhaarError):
    """Entity absent, or not visible in the caller's scope."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} {entity_id} not found")


class Conflict(NyayAdhaarError):
    """Stored state changed since the caller last read it, or a unique key is taken."""


class PermissionDenied(NyayAdhaarError):
    """Caller's role may not perform this operation."""


class ScopeLookupFailure(NyayAdhaarError):
    """Victim lookup for a user-role caller failed."""


class StoreUnavailable(NyayAdhaarError):
    """Remote entity store could not be reached or returned an error."""


class InvalidRequest(NyayAdhaarError):
    """Request is well-formed but inconsistent with stored records."""
