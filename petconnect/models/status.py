"""Status vocabularies and allowed transitions for adoption and foster requests."""

from enum import Enum
from typing import Optional, Union


class RequestKind(str, Enum):
    """Which request flow a status belongs to."""
    ADOPTION = "adoption"
    FOSTER = "foster"


class AdoptionStatus(str, Enum):
    """Adoption request statuses."""
    PENDING = "pending"
    APPROVED = "approved"
    IGNORED = "ignored"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"
    MEETING = "meeting"
    FINALIZED = "finalized"
    CHAT = "chat"
    AGREEMENT_SENT = "agreement_sent"
    AGREEMENT_SIGNED = "agreement_signed"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_COMPLETED = "payment_completed"
    PAYMENT_FAILED = "payment_failed"


class FosterStatus(str, Enum):
    """Foster request statuses."""
    PENDING = "pending"
    IN_DISCUSSION = "in_discussion"
    APPROVED = "approved"
    REJECTED = "rejected"
    MEETING_SCHEDULED = "meeting_scheduled"


# meeting -> meeting is a reschedule
ADOPTION_TRANSITIONS: dict[AdoptionStatus, frozenset[AdoptionStatus]] = {
    AdoptionStatus.PENDING: frozenset({
        AdoptionStatus.APPROVED,
        AdoptionStatus.IGNORED,
        AdoptionStatus.REJECTED,
    }),
    AdoptionStatus.APPROVED: frozenset({AdoptionStatus.MEETING}),
    AdoptionStatus.MEETING: frozenset({AdoptionStatus.MEETING, AdoptionStatus.FINALIZED}),
}

FOSTER_TRANSITIONS: dict[FosterStatus, frozenset[FosterStatus]] = {
    FosterStatus.PENDING: frozenset({
        FosterStatus.IN_DISCUSSION,
        FosterStatus.APPROVED,
        FosterStatus.REJECTED,
    }),
    FosterStatus.IN_DISCUSSION: frozenset({
        FosterStatus.APPROVED,
        FosterStatus.REJECTED,
        FosterStatus.MEETING_SCHEDULED,
    }),
}

ADOPTION_TERMINAL = frozenset({
    AdoptionStatus.FINALIZED,
    AdoptionStatus.IGNORED,
    AdoptionStatus.REJECTED,
    AdoptionStatus.PAYMENT_FAILED,
})

FOSTER_TERMINAL = frozenset({
    FosterStatus.APPROVED,
    FosterStatus.REJECTED,
})

# Owner-only decisions; the other foster moves can be made by either party
FOSTER_OWNER_DECISIONS = frozenset({FosterStatus.APPROVED, FosterStatus.REJECTED})

AnyStatus = Union[AdoptionStatus, FosterStatus]


def _vocabulary(kind: Union[RequestKind, str]):
    if RequestKind(kind) is RequestKind.ADOPTION:
        return AdoptionStatus, ADOPTION_TRANSITIONS, ADOPTION_TERMINAL
    return FosterStatus, FOSTER_TRANSITIONS, FOSTER_TERMINAL


def parse_status(value: Optional[Union[str, Enum]], kind: Union[RequestKind, str]) -> Optional[AnyStatus]:
    """Coerce a raw status string into the vocabulary of ``kind``; unknown values give None."""
    if value is None:
        return None
    enum_cls, _, _ = _vocabulary(kind)
    raw = value.value if isinstance(value, Enum) else str(value)
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        return None


def can_transition(current, target, kind: Union[RequestKind, str]) -> bool:
    """Whether ``current -> target`` is an allowed move. Never raises on unknown statuses."""
    try:
        _, transitions, _ = _vocabulary(kind)
    except ValueError:
        return False
    source = parse_status(current, kind)
    destination = parse_status(target, kind)
    if source is None or destination is None:
        return False
    return destination in transitions.get(source, frozenset())


def is_terminal(status, kind: Union[RequestKind, str]) -> bool:
    parsed = parse_status(status, kind)
    if parsed is None:
        return False
    _, _, terminal = _vocabulary(kind)
    return parsed in terminal


def allowed_targets(status, kind: Union[RequestKind, str]) -> frozenset:
    parsed = parse_status(status, kind)
    if parsed is None:
        return frozenset()
    _, transitions, _ = _vocabulary(kind)
    return transitions.get(parsed, frozenset())
