"""Foster service - applying to foster personal listings and opening the owner chat."""

from typing import Optional
from pydantic import ValidationError as PydanticValidationError

from petconnect.models.foster_request import FosterRequest
from petconnect.models.pet import Pet
from petconnect.models.user import User
from petconnect.services.backend_client import BackendClient
from petconnect.services.request_lifecycle import RequestLifecycle, TransitionResult
from petconnect.utils.cancellation import CancellationToken
from petconnect.utils.errors import ValidationError
from petconnect.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


class FosterService:

    def __init__(self, client: BackendClient, lifecycle: Optional[RequestLifecycle] = None):
        self.client = client
        self.lifecycle = lifecycle or RequestLifecycle(client)

    async def submit(
        self,
        listing: Pet,
        message: str,
        user: Optional[User] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> FosterRequest:
        """
        Apply to foster ``listing``.

        Raises ValidationError for an empty message, for shelter pets, and for
        the applicant's own listing.
        """
        applicant = user or self.client.session.user
        text = (message or "").strip()
        if not text:
            raise ValidationError("Please include a message for the owner")
        if not listing.is_personal_listing:
            raise ValidationError("Only personal listings accept foster requests")
        if applicant is not None and listing.owner_id == applicant.id:
            raise ValidationError("You cannot request to foster your own listing")

        payload = await self.client.submit_foster_request(listing.id, text, cancel_token=cancel_token)
        logger.info(
            "Foster request submitted",
            listing_id=listing.id,
            user_id=mask_user_id(applicant.id if applicant else None)
        )

        data = {"_id": "", "pet": listing.id, "message": text, "user": applicant.id if applicant else None}
        local = dict(data)
        # The backend may answer with just a confirmation message instead of the request
        if payload and payload.get("_id"):
            data.update(payload)
        try:
            return FosterRequest.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(
                "Server response did not parse, keeping submitted request",
                listing_id=listing.id,
                error=str(e)
            )
            local["_id"] = payload.get("_id") if isinstance(payload.get("_id"), str) else ""
            return FosterRequest.model_validate(local)

    async def start_chat(
        self,
        pet_id: str,
        request: FosterRequest,
        cancel_token: Optional[CancellationToken] = None
    ) -> TransitionResult:
        """Open the owner/applicant chat; the result carries the request in in_discussion."""
        return await self.lifecycle.discuss_foster(request, pet_id=pet_id, cancel_token=cancel_token)
