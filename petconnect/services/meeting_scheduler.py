"""Meeting scheduler - check a proposed meeting time against staff availability.

Coverage is a soft constraint: an uncovered time produces a warning, and the
meeting still goes through unless the caller turns overrides off.
"""

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel

from petconnect.models.adoption_request import AdoptionRequest
from petconnect.models.availability import AvailabilitySlot, WEEKDAYS
from petconnect.models.status import AdoptionStatus
from petconnect.services.request_lifecycle import (
    RequestLifecycle,
    TransitionResult,
    parse_meeting_time,
    plan_transition,
)
from petconnect.utils.cancellation import CancellationToken
from petconnect.utils.errors import MalformedSlotError, NoAvailabilityError
from petconnect.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

NO_AVAILABILITY = "no availability"


class MeetingProposal(BaseModel):
    """Result of checking a candidate time against availability."""
    candidate: datetime
    covered: bool
    slot: Optional[AvailabilitySlot] = None
    warning: Optional[str] = None


class ScheduledMeeting(BaseModel):
    proposal: MeetingProposal
    result: TransitionResult


def slot_covers(slot: AvailabilitySlot, candidate: datetime) -> bool:
    """Dated slots match on the date, recurring ones on weekday; time must fall in [start, end)."""
    if slot.date is not None:
        if slot.date != candidate.date():
            return False
    elif slot.day != WEEKDAYS[candidate.weekday()]:
        return False
    minute_of_day = candidate.hour * 60 + candidate.minute
    return slot.start_minutes <= minute_of_day < slot.end_minutes


def find_covering_slot(candidate: datetime, slots: list[AvailabilitySlot]) -> Optional[AvailabilitySlot]:
    for slot in slots:
        try:
            if slot_covers(slot, candidate):
                return slot
        except MalformedSlotError:
            logger.debug("Ignoring malformed availability slot", slot=slot.describe())
    return None


def check_meeting(candidate: datetime, slots: list[AvailabilitySlot]) -> MeetingProposal:
    slot = find_covering_slot(candidate, slots)
    if slot is None:
        return MeetingProposal(candidate=candidate, covered=False, warning=NO_AVAILABILITY)
    return MeetingProposal(candidate=candidate, covered=True, slot=slot)


class MeetingScheduler:
    """Pairs a request with a meeting time and hands the transition to RequestLifecycle."""

    def __init__(self, lifecycle: RequestLifecycle):
        self.lifecycle = lifecycle

    async def propose_meeting(
        self,
        request: AdoptionRequest,
        candidate: Union[str, datetime],
        staff_availability: list[AvailabilitySlot],
        override: bool = True,
        meeting_type: Optional[str] = None,
        location: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ScheduledMeeting:
        plan_transition(request, AdoptionStatus.MEETING)
        when = parse_meeting_time(candidate)
        proposal = check_meeting(when, staff_availability)

        if not proposal.covered:
            logger.warning(
                "Meeting time outside staff availability",
                request_id=request.id,
                candidate=when.isoformat(),
                slots_checked=len(staff_availability),
                override=override
            )
            if not override:
                raise NoAvailabilityError()

        result = await self.lifecycle.request_meeting(
            request,
            when,
            meeting_type=meeting_type,
            location=location,
            cancel_token=cancel_token,
        )
        return ScheduledMeeting(proposal=proposal, result=result)
