"""Request lifecycle - apply staff/owner decisions to adoption and foster requests.

Transitions are checked locally before any backend call. The backend stays the
final authority: nothing is committed locally until it answers, and a failed
call leaves the caller's request object as it was.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Union
from pydantic import BaseModel, ValidationError as PydanticValidationError

from petconnect.models.adoption_request import AdoptionRequest, MeetingInfo
from petconnect.models.foster_request import FosterRequest
from petconnect.models.status import (
    AdoptionStatus,
    FosterStatus,
    RequestKind,
    can_transition,
)
from petconnect.services.backend_client import BackendClient
from petconnect.utils.cancellation import CancellationToken
from petconnect.utils.errors import (
    InvalidMeetingTimeError,
    InvalidTransitionError,
    ValidationError,
)
from petconnect.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

AnyRequest = Union[AdoptionRequest, FosterRequest]

NO_TRANSITION = "no transition performed"


class TransitionResult(BaseModel):
    """Outcome of a lifecycle operation."""
    performed: bool
    request: Union[AdoptionRequest, FosterRequest]
    previous_status: str
    message: str = ""


def request_kind(request: AnyRequest) -> RequestKind:
    if isinstance(request, FosterRequest):
        return RequestKind.FOSTER
    return RequestKind.ADOPTION


def plan_transition(request: AnyRequest, target: Union[AdoptionStatus, FosterStatus]) -> bool:
    """
    Decide whether moving ``request`` to ``target`` needs a backend call.

    Returns False when the request already sits in ``target`` (and the move is not
    a self-loop like a meeting reschedule), True when the move is allowed, and
    raises InvalidTransitionError otherwise.
    """
    kind = request_kind(request)
    if can_transition(request.status, target, kind):
        return True
    if request.status == target:
        return False
    raise InvalidTransitionError(request.status.value, target.value, kind.value)


def parse_meeting_time(value: Union[str, datetime, None], now: Optional[datetime] = None) -> datetime:
    """
    Parse a meeting timestamp and require it to be in the future.

    Naive values are taken as UTC. Raises InvalidMeetingTimeError.
    """
    if value is None:
        raise InvalidMeetingTimeError()
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidMeetingTimeError()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    if parsed <= current:
        raise InvalidMeetingTimeError()
    return parsed


def to_iso_utc(moment: datetime) -> str:
    """ISO string with millisecond precision and a Z suffix, as the backend stores it."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def merge_response(request: AnyRequest, updates: dict, payload: Optional[dict]) -> AnyRequest:
    """Build the post-transition request from the local copy, local updates and the server's answer."""
    base = request.model_dump(by_alias=True)
    base.update(updates)
    if payload:
        base.update(payload)
    try:
        return type(request).model_validate(base)
    except PydanticValidationError as e:
        logger.warning(
            "Server response did not parse, keeping local transition",
            request_id=request.id,
            error=str(e)
        )
        fallback = request.model_dump(by_alias=True)
        fallback.update(updates)
        return type(request).model_validate(fallback)


class RequestLifecycle:
    """Applies lifecycle decisions through the backend."""

    def __init__(self, client: BackendClient):
        self.client = client

    def _noop(self, request: AnyRequest) -> TransitionResult:
        logger.info(
            "Request already in target status",
            request_id=request.id,
            status=request.status.value,
            kind=request_kind(request).value
        )
        return TransitionResult(
            performed=False,
            request=request,
            previous_status=request.status.value,
            message=NO_TRANSITION,
        )

    def _done(self, before: AnyRequest, after: AnyRequest, message: str) -> TransitionResult:
        logger.info(
            "Request status transition",
            request_id=before.id,
            kind=request_kind(before).value,
            from_status=before.status.value,
            to_status=after.status.value
        )
        return TransitionResult(
            performed=True,
            request=after,
            previous_status=before.status.value,
            message=message,
        )

    async def _set_adoption_status(
        self,
        request: AdoptionRequest,
        target: AdoptionStatus,
        cancel_token: Optional[CancellationToken],
        meeting: Optional[MeetingInfo] = None,
        message: str = "",
    ) -> TransitionResult:
        if not isinstance(request, AdoptionRequest):
            raise ValidationError(f"Expected an adoption request, got {type(request).__name__}")
        if not plan_transition(request, target):
            return self._noop(request)

        meeting_date = to_iso_utc(meeting.date) if meeting and meeting.date else None
        payload = await self.client.update_adoption_status(
            request.id,
            target.value,
            meeting_date=meeting_date,
            cancel_token=cancel_token,
        )

        updates: dict[str, Any] = {"status": target.value}
        if meeting is not None:
            updates["meeting"] = meeting.model_dump(by_alias=True, exclude_none=True)
        return self._done(request, merge_response(request, updates, payload), message)

    async def approve(
        self,
        request: AdoptionRequest,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        return await self._set_adoption_status(
            request, AdoptionStatus.APPROVED, cancel_token, message="Request approved"
        )

    async def ignore(
        self,
        request: AdoptionRequest,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        return await self._set_adoption_status(
            request, AdoptionStatus.IGNORED, cancel_token, message="Request ignored"
        )

    async def reject(
        self,
        request: AnyRequest,
        pet_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        """Reject an adoption request, or a foster request (delegates to reject_foster)."""
        if isinstance(request, FosterRequest):
            return await self.reject_foster(request, pet_id=pet_id, cancel_token=cancel_token)
        return await self._set_adoption_status(
            request, AdoptionStatus.REJECTED, cancel_token, message="Request rejected"
        )

    async def request_meeting(
        self,
        request: AdoptionRequest,
        meeting_at: Union[str, datetime],
        meeting_type: Optional[str] = None,
        location: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TransitionResult:
        """Move an approved request to ``meeting`` (or reschedule an existing meeting)."""
        if not isinstance(request, AdoptionRequest):
            raise ValidationError("Meetings can only be requested for adoption requests")
        # Transition first: a request in the wrong state is reported as such even with a bad time
        plan_transition(request, AdoptionStatus.MEETING)
        when = parse_meeting_time(meeting_at)
        meeting = MeetingInfo(date=when, type=meeting_type, location=location, status="scheduled")
        return await self._set_adoption_status(
            request, AdoptionStatus.MEETING, cancel_token, meeting=meeting, message="Meeting scheduled"
        )

    async def finalize(
        self,
        request: AdoptionRequest,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        return await self._set_adoption_status(
            request, AdoptionStatus.FINALIZED, cancel_token, message="Adoption finalized"
        )

    async def _decide_foster(
        self,
        request: FosterRequest,
        target: FosterStatus,
        pet_id: Optional[str],
        cancel_token: Optional[CancellationToken],
    ) -> TransitionResult:
        if not isinstance(request, FosterRequest):
            raise ValidationError(f"Expected a foster request, got {type(request).__name__}")
        if not plan_transition(request, target):
            return self._noop(request)

        listing_id = pet_id or request.pet_id
        if not listing_id:
            raise ValidationError("Foster decisions need the listing (pet) ID")

        action = "approve" if target is FosterStatus.APPROVED else "reject"
        payload = await self.client.update_foster_request(
            listing_id, request.id, action, cancel_token=cancel_token
        )
        after = merge_response(request, {"status": target.value}, payload)
        return self._done(request, after, f"Foster request {action}d")

    async def approve_foster(
        self,
        request: FosterRequest,
        pet_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        return await self._decide_foster(request, FosterStatus.APPROVED, pet_id, cancel_token)

    async def reject_foster(
        self,
        request: FosterRequest,
        pet_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        return await self._decide_foster(request, FosterStatus.REJECTED, pet_id, cancel_token)

    async def discuss_foster(
        self,
        request: FosterRequest,
        pet_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        """Open the chat thread for a foster request, moving it to in_discussion."""
        if not isinstance(request, FosterRequest):
            raise ValidationError(f"Expected a foster request, got {type(request).__name__}")
        if not plan_transition(request, FosterStatus.IN_DISCUSSION):
            return self._noop(request)

        listing_id = pet_id or request.pet_id
        if not listing_id:
            raise ValidationError("Starting a chat needs the listing (pet) ID")

        chat_id = await self.client.start_foster_chat(listing_id, request.id, cancel_token=cancel_token)
        updates: dict[str, Any] = {"status": FosterStatus.IN_DISCUSSION.value}
        if chat_id:
            updates["chatThread"] = chat_id
        return self._done(request, merge_response(request, updates, None), "Chat started")
