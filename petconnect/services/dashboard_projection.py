"""Dashboard projection - derived counts, filters and badges for the role dashboards.

Every function recomputes from the source collections and never mutates them.
"""

from typing import Optional, Sequence, Union
from pydantic import BaseModel

from petconnect.models.adoption_request import AdoptionRequest
from petconnect.models.availability import AvailabilitySlot
from petconnect.models.foster_request import FosterRequest
from petconnect.models.pet import Pet
from petconnect.models.status import AdoptionStatus, FosterStatus, RequestKind, parse_status
from petconnect.models.user import Role
from petconnect.services import availability_store

AnyRequest = Union[AdoptionRequest, FosterRequest]

NEUTRAL_BADGE = "gray"

NEEDS_REVIEW = {
    RequestKind.ADOPTION: frozenset({AdoptionStatus.PENDING}),
    RequestKind.FOSTER: frozenset({
        FosterStatus.PENDING,
        FosterStatus.IN_DISCUSSION,
        FosterStatus.MEETING_SCHEDULED,
    }),
}

REJECTED_LIKE = {
    RequestKind.ADOPTION: frozenset({AdoptionStatus.REJECTED, AdoptionStatus.IGNORED}),
    RequestKind.FOSTER: frozenset({FosterStatus.REJECTED}),
}

ADOPTION_LABELS = {
    AdoptionStatus.PENDING: "Pending",
    AdoptionStatus.APPROVED: "Approved",
    AdoptionStatus.IGNORED: "Ignored",
    AdoptionStatus.REJECTED: "Rejected",
    AdoptionStatus.ON_HOLD: "On Hold",
    AdoptionStatus.MEETING: "Meeting",
    AdoptionStatus.FINALIZED: "Finalized",
    AdoptionStatus.CHAT: "Chat",
    AdoptionStatus.AGREEMENT_SENT: "Agreement Sent",
    AdoptionStatus.AGREEMENT_SIGNED: "Agreement Signed",
    AdoptionStatus.PAYMENT_PENDING: "Payment Pending",
    AdoptionStatus.PAYMENT_COMPLETED: "Payment Completed",
    AdoptionStatus.PAYMENT_FAILED: "Payment Failed",
}

ADOPTION_BADGES = {
    AdoptionStatus.PENDING: "yellow",
    AdoptionStatus.APPROVED: "blue",
    AdoptionStatus.MEETING: "indigo",
    AdoptionStatus.FINALIZED: "green",
    AdoptionStatus.IGNORED: "red",
    AdoptionStatus.REJECTED: "red",
    AdoptionStatus.ON_HOLD: "gray",
    AdoptionStatus.CHAT: "purple",
    AdoptionStatus.AGREEMENT_SENT: "emerald",
    AdoptionStatus.AGREEMENT_SIGNED: "emerald",
    AdoptionStatus.PAYMENT_PENDING: "orange",
    AdoptionStatus.PAYMENT_COMPLETED: "green",
    AdoptionStatus.PAYMENT_FAILED: "red",
}

FOSTER_LABELS = {
    FosterStatus.PENDING: "Pending Review",
    FosterStatus.IN_DISCUSSION: "In Discussion",
    FosterStatus.APPROVED: "Approved",
    FosterStatus.REJECTED: "Rejected",
    FosterStatus.MEETING_SCHEDULED: "Meeting Scheduled",
}

FOSTER_BADGES = {
    FosterStatus.PENDING: "yellow",
    FosterStatus.IN_DISCUSSION: "blue",
    FosterStatus.APPROVED: "green",
    FosterStatus.REJECTED: "red",
    FosterStatus.MEETING_SCHEDULED: "purple",
}

# Shelter pet statuses are free-form strings set by staff, vets and owners
PET_STATUS_BADGES = {
    "available": "green",
    "available_fostering": "green",
    "ready for adoption": "green",
    "in treatment": "yellow",
    "ready for treatment": "yellow",
    "pending": "yellow",
    "pending_foster": "yellow",
    "in training": "purple",
    "training complete": "purple",
    "fostered": "blue",
    "adopted": "blue",
    "unavailable": "red",
}

LISTING_LABELS = {
    "available_fostering": "Available",
    "pending_foster": "Pending Review",
    "fostered": "Fostered",
    "available": "Available",
    "pending": "Pending Review",
}


class RequestCounts(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    needs_review: int = 0


class ListingAnalytics(BaseModel):
    total: int = 0
    available: int = 0
    pending_requests: int = 0
    currently_fostered: int = 0


class AvailabilitySummary(BaseModel):
    slot_count: int = 0
    total_hours: float = 0.0
    most_frequent_day: Optional[str] = None


def _kind_of(requests: Sequence[AnyRequest], kind: Optional[RequestKind]) -> RequestKind:
    if kind is not None:
        return RequestKind(kind)
    if requests and isinstance(requests[0], FosterRequest):
        return RequestKind.FOSTER
    return RequestKind.ADOPTION


def needs_review(requests: Sequence[AnyRequest], kind: Optional[RequestKind] = None) -> list[AnyRequest]:
    """Requests still waiting on the reviewer (foster: pending, in discussion or meeting scheduled)."""
    wanted = NEEDS_REVIEW[_kind_of(requests, kind)]
    return [r for r in requests if r.status in wanted]


def request_counts(requests: Sequence[AnyRequest], kind: Optional[RequestKind] = None) -> RequestCounts:
    resolved = _kind_of(requests, kind)
    review = len(needs_review(requests, resolved))
    approved_status = AdoptionStatus.APPROVED if resolved is RequestKind.ADOPTION else FosterStatus.APPROVED
    # Foster pages fold discussion and meetings into the pending tab
    pending = review
    if resolved is RequestKind.ADOPTION:
        pending = sum(1 for r in requests if r.status == AdoptionStatus.PENDING)
    return RequestCounts(
        total=len(requests),
        pending=pending,
        approved=sum(1 for r in requests if r.status == approved_status),
        rejected=sum(1 for r in requests if r.status in REJECTED_LIKE[resolved]),
        needs_review=review,
    )


def filter_by_tab(requests: Sequence[FosterRequest], tab: str) -> list[FosterRequest]:
    """Foster management tabs: pending, approved, rejected, all."""
    if tab == "all":
        return list(requests)
    if tab == "pending":
        return needs_review(requests, RequestKind.FOSTER)
    wanted = parse_status(tab, RequestKind.FOSTER)
    return [r for r in requests if r.status == wanted]


def browse_listings(
    shelter_pets: Sequence[Pet],
    personal_listings: Sequence[Pet],
    user_id: Optional[str],
) -> list[Pet]:
    """Shelter pets first, then personal foster listings that the viewer does not own."""
    visible = [p for p in personal_listings if user_id is None or p.owner_id != user_id]
    return [*shelter_pets, *visible]


def available_pets(pets: Sequence[Pet]) -> list[Pet]:
    return [p for p in pets if "available" in (p.status or "").lower()]


def adopter_display_status(
    requests: Sequence[AdoptionRequest],
    adoption_status: Optional[str] = None,
) -> str:
    """Headline status on the adopter dashboard."""
    if adoption_status:
        return adoption_status
    statuses = {r.status for r in requests}
    if AdoptionStatus.APPROVED in statuses:
        return "Approved - next steps"
    if AdoptionStatus.MEETING in statuses:
        return "Meeting scheduled"
    if statuses:
        return "In progress"
    return "Active"


def listing_analytics(listings: Sequence[Pet]) -> ListingAnalytics:
    return ListingAnalytics(
        total=len(listings),
        available=sum(1 for p in listings if p.status == "available_fostering"),
        pending_requests=sum(
            1 for p in listings for r in p.foster_requests if r.status == FosterStatus.PENDING
        ),
        currently_fostered=sum(1 for p in listings if p.status == "fostered"),
    )


def listings_with_pending_requests(listings: Sequence[Pet]) -> list[Pet]:
    return [
        p for p in listings
        if any(r.status == FosterStatus.PENDING for r in p.foster_requests)
    ]


def status_label(status, kind: RequestKind = RequestKind.ADOPTION) -> str:
    """Human label; unknown statuses are shown as-is."""
    parsed = parse_status(status, kind)
    labels = ADOPTION_LABELS if RequestKind(kind) is RequestKind.ADOPTION else FOSTER_LABELS
    if parsed is None:
        return str(status) if status else ""
    return labels.get(parsed, parsed.value)


def status_badge(status, kind: RequestKind = RequestKind.ADOPTION) -> str:
    """Badge color; unknown statuses fall back to gray."""
    parsed = parse_status(status, kind)
    badges = ADOPTION_BADGES if RequestKind(kind) is RequestKind.ADOPTION else FOSTER_BADGES
    if parsed is None:
        return NEUTRAL_BADGE
    return badges.get(parsed, NEUTRAL_BADGE)


def pet_status_badge(status: Optional[str]) -> str:
    return PET_STATUS_BADGES.get((status or "").strip().lower(), NEUTRAL_BADGE)


def listing_status_label(status: Optional[str]) -> str:
    if not status:
        return ""
    return LISTING_LABELS.get(status, status)


def staff_availability_summary(slots: Sequence[AvailabilitySlot]) -> AvailabilitySummary:
    slot_list = list(slots)
    return AvailabilitySummary(
        slot_count=availability_store.slot_count(slot_list),
        total_hours=availability_store.total_hours(slot_list),
        most_frequent_day=availability_store.most_frequent_day(slot_list),
    )


def dashboard_route(role: Optional[Union[Role, str]]) -> str:
    """Landing route for a signed-in user."""
    value = (role.value if isinstance(role, Role) else str(role or "")).lower()
    if value in (Role.STAFF.value, Role.ADMIN.value):
        return "/staff"
    if value == Role.VET.value:
        return "/vet"
    return "/dashboard"
