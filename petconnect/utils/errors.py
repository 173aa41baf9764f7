"""Error handling utilities."""

from typing import Any, Optional


class PetConnectError(Exception):
    """Base exception for the PetConnect client."""
    pass


class ValidationError(PetConnectError):
    """Input rejected locally, before any network call."""
    pass


class MalformedSlotError(ValidationError):
    """Availability slot with missing fields or start not before end."""
    pass


class InvalidMeetingTimeError(ValidationError):
    """Meeting timestamp is unparseable or not in the future."""

    def __init__(self, message: str = "invalid meeting time"):
        super().__init__(message)


class InvalidTransitionError(ValidationError):
    """Requested status change is not allowed from the current status."""

    def __init__(self, current: str, target: str, kind: str):
        self.current = current
        self.target = target
        self.kind = kind
        super().__init__(f"Cannot move {kind} request from '{current}' to '{target}'")


class NoAvailabilityError(ValidationError):
    """No staff availability slot covers the proposed meeting time."""

    def __init__(self, message: str = "no availability"):
        super().__init__(message)


class SlotOverlapError(PetConnectError):
    """Candidate slot overlaps an existing slot."""

    def __init__(self, conflicting_slot: Any):
        self.conflicting_slot = conflicting_slot
        super().__init__(f"Slot overlaps existing slot {conflicting_slot.describe()}")


class BackendError(PetConnectError):
    """Backend call failed (transport or HTTP error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AuthorizationError(BackendError):
    """Token missing, expired or not allowed."""

    @property
    def requires_login(self) -> bool:
        return self.status_code in (None, 401)


class ConflictError(BackendError):
    """Backend refused a write because the data changed underneath."""
    pass


class OperationCancelledError(PetConnectError):
    """Caller lost interest before the response arrived."""
    pass
