"""Tests for availability service."""

import pytest
from petconnect.models.availability import AvailabilitySlot
from petconnect.services.availability_service import AvailabilityService
from petconnect.services.backend_client import AvailabilitySnapshot
from petconnect.services.notices import NoticeLevel, run_action
from petconnect.utils.errors import BackendError, ConflictError, MalformedSlotError, SlotOverlapError
from tests.utils.helpers import RecordingBackend, make_client


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_slot_submits_full_list_with_version(mock_backend_client, weekly_slots):
    """Test an added slot is appended and sent with the read version."""
    mock_backend_client.get_availability.return_value = AvailabilitySnapshot(slots=weekly_slots, version="7")
    service = AvailabilityService(mock_backend_client)
    candidate = AvailabilitySlot(day="Thursday", start_time="09:00", end_time="10:00")

    result = await service.add_slot(candidate)

    submitted = mock_backend_client.replace_availability.await_args.args[0]
    assert submitted == [*weekly_slots, candidate]
    assert mock_backend_client.replace_availability.await_args.kwargs["version"] == "7"
    assert result == submitted


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_slot_returns_server_copy(mock_backend_client):
    """Test the server's answer wins when it returns the saved list."""
    saved = [AvailabilitySlot(_id="new", day="Monday", start_time="09:00", end_time="10:00")]
    mock_backend_client.replace_availability.return_value = AvailabilitySnapshot(slots=saved, version="2")
    service = AvailabilityService(mock_backend_client)

    result = await service.add_slot(AvailabilitySlot(day="Monday", start_time="09:00", end_time="10:00"))

    assert result == saved


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_overlapping_slot_sends_nothing(mock_backend_client, weekly_slots):
    """Test an overlapping slot is refused locally."""
    mock_backend_client.get_availability.return_value = AvailabilitySnapshot(slots=weekly_slots)
    service = AvailabilityService(mock_backend_client)

    with pytest.raises(SlotOverlapError):
        await service.add_slot(AvailabilitySlot(day="Monday", start_time="08:00", end_time="09:30"))

    mock_backend_client.replace_availability.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_malformed_slot_sends_nothing(mock_backend_client):
    """Test a malformed slot is refused locally."""
    service = AvailabilityService(mock_backend_client)

    with pytest.raises(MalformedSlotError):
        await service.add_slot(AvailabilitySlot(day="Monday", start_time="10:00", end_time="10:00"))

    mock_backend_client.replace_availability.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_edit_surfaces_conflict(mock_backend_client):
    """Test a stale version is reported as ConflictError."""
    mock_backend_client.replace_availability.side_effect = ConflictError("stale", status_code=412)
    service = AvailabilityService(mock_backend_client)

    with pytest.raises(ConflictError):
        await service.add_slot(AvailabilitySlot(day="Monday", start_time="09:00", end_time="10:00"))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_slot_with_id_uses_delete(mock_backend_client, weekly_slots):
    """Test slots with an ID are deleted by ID."""
    mock_backend_client.get_availability.return_value = AvailabilitySnapshot(slots=weekly_slots[1:])
    service = AvailabilityService(mock_backend_client)

    result = await service.remove_slot(weekly_slots[0])

    mock_backend_client.delete_availability.assert_awaited_once_with(slot_id="slot-1", cancel_token=None)
    mock_backend_client.replace_availability.assert_not_awaited()
    assert result == weekly_slots[1:]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_slot_without_id_keeps_rest_of_day(mock_backend_client):
    """Test ID-less removal submits the filtered list instead of deleting the day."""
    morning = AvailabilitySlot(day="Monday", start_time="09:00", end_time="10:00")
    evening = AvailabilitySlot(day="Monday", start_time="18:00", end_time="19:00")
    mock_backend_client.get_availability.return_value = AvailabilitySnapshot(slots=[morning, evening], version="5")
    service = AvailabilityService(mock_backend_client)

    result = await service.remove_slot(AvailabilitySlot(day="Monday", start_time="09:00", end_time="10:00"))

    mock_backend_client.delete_availability.assert_not_awaited()
    mock_backend_client.replace_availability.assert_awaited_once_with([evening], version="5", cancel_token=None)
    assert result == [evening]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_missing_slot_is_noop(mock_backend_client, monday_morning_slot):
    """Test removing an unknown ID-less slot makes no write."""
    service = AvailabilityService(mock_backend_client)

    result = await service.remove_slot(monday_morning_slot)

    assert result == []
    mock_backend_client.replace_availability.assert_not_awaited()


def _backend_with_unreadable_slot() -> RecordingBackend:
    return RecordingBackend({
        ("GET", "/auth/staff/availability"): {
            "version": "9",
            "slots": [
                {"_id": "a", "day": "Monday", "startTime": "09:00", "endTime": "12:00"},
                {"_id": "b", "day": "Tuesday", "startTime": "09:00"},
            ],
        },
        ("POST", "/auth/staff/availability"): {"version": "10", "slots": []},
    })


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_slot_refuses_when_saved_list_has_unreadable_rows():
    """Test an edit is not submitted when the saved list has a row the client cannot read."""
    backend = _backend_with_unreadable_slot()
    service = AvailabilityService(make_client(backend))
    friday = AvailabilitySlot(day="Friday", start_time="09:00", end_time="10:00")

    async with service.client:
        with pytest.raises(BackendError):
            await service.add_slot(friday)
        notice = await run_action(service.add_slot(friday), "Slot added")

    assert notice.level is NoticeLevel.ERROR
    assert [request.method for request in backend.requests] == ["GET", "GET"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_slot_without_id_refuses_when_saved_list_has_unreadable_rows():
    """Test identity removal leaves the server list alone when a row is unreadable."""
    backend = _backend_with_unreadable_slot()
    service = AvailabilityService(make_client(backend))

    async with service.client:
        with pytest.raises(BackendError):
            await service.remove_slot(AvailabilitySlot(day="Monday", start_time="09:00", end_time="12:00"))

    assert all(request.method == "GET" for request in backend.requests)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_slots_still_skips_unreadable_rows():
    """Test plain listing shows the readable slots."""
    backend = _backend_with_unreadable_slot()
    service = AvailabilityService(make_client(backend))

    async with service.client:
        slots = await service.list_slots()

    assert [slot.id for slot in slots] == ["a"]
