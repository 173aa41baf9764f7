"""Availability service - incremental slot edits for the signed-in staff member."""

from typing import Optional, Union

from petconnect.models.availability import AvailabilitySlot
from petconnect.services import availability_store
from petconnect.services.backend_client import AvailabilitySnapshot, BackendClient
from petconnect.utils.cancellation import CancellationToken
from petconnect.utils.errors import MalformedSlotError
from petconnect.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


class AvailabilityService:
    """
    Read-modify-write over the staff availability endpoint.

    Every edit re-reads the current list and its version, validates locally,
    then submits the full list with the version as If-Match. The re-read is
    strict: a row the client cannot parse raises BackendError, since submitting
    without it would delete it on the server. A concurrent edit
    makes the backend answer 409/412, which surfaces as ConflictError.
    """

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_slots(self, cancel_token: Optional[CancellationToken] = None) -> list[AvailabilitySlot]:
        snapshot = await self.client.get_availability(cancel_token=cancel_token)
        return snapshot.slots

    async def add_slot(
        self,
        candidate: AvailabilitySlot,
        cancel_token: Optional[CancellationToken] = None
    ) -> list[AvailabilitySlot]:
        """Add one slot; raises MalformedSlotError or SlotOverlapError before anything is sent."""
        current = await self.client.get_availability(strict=True, cancel_token=cancel_token)
        updated = availability_store.add_slot(current.slots, candidate)

        saved = await self.client.replace_availability(
            updated, version=current.version, cancel_token=cancel_token
        )
        logger.info(
            "Availability slot added",
            user_id=mask_user_id(self.client.session.user_id),
            slot=candidate.describe(),
            slot_count=len(updated)
        )
        return self._result(saved, updated)

    async def remove_slot(
        self,
        target: Union[AvailabilitySlot, str],
        cancel_token: Optional[CancellationToken] = None
    ) -> list[AvailabilitySlot]:
        """Remove one slot by ID, or by its full (day, start, end, date) identity."""
        slot_id = target if isinstance(target, str) else target.id
        if slot_id:
            await self.client.delete_availability(slot_id=slot_id, cancel_token=cancel_token)
            logger.info(
                "Availability slot deleted",
                user_id=mask_user_id(self.client.session.user_id),
                slot_id=slot_id
            )
            return await self.list_slots(cancel_token=cancel_token)
        if isinstance(target, str):
            raise MalformedSlotError("Slot ID is required")

        current = await self.client.get_availability(strict=True, cancel_token=cancel_token)
        remaining = availability_store.remove_slot(current.slots, target)
        if len(remaining) == len(current.slots):
            return current.slots

        saved = await self.client.replace_availability(
            remaining, version=current.version, cancel_token=cancel_token
        )
        logger.info(
            "Availability slot removed",
            user_id=mask_user_id(self.client.session.user_id),
            slot=target.describe(),
            slot_count=len(remaining)
        )
        return self._result(saved, remaining)

    @staticmethod
    def _result(saved: Optional[AvailabilitySnapshot], submitted: list[AvailabilitySlot]) -> list[AvailabilitySlot]:
        # Some deployments answer with an empty body
        if saved is not None:
            return saved.slots
        return submitted
