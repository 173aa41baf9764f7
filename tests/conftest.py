"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PETCONNECT_API_BASE_URL", "http://petconnect.test/api")
os.environ.setdefault("PETCONNECT_HTTP_TIMEOUT_SECONDS", "5")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "text")

from petconnect.models.adoption_request import AdoptionRequest
from petconnect.models.availability import AvailabilitySlot
from petconnect.models.foster_request import FosterRequest
from petconnect.models.user import Role, Session, User
from petconnect.services.backend_client import AvailabilitySnapshot, BackendClient
from petconnect.utils.settings import Settings


@pytest.fixture
def settings():
    """Settings pointing at a fake backend."""
    return Settings(api_base_url="http://petconnect.test/api", http_timeout_seconds=5.0)


@pytest.fixture
def staff_user():
    return User(_id="staff-1", email="staff@shelter.test", role=Role.STAFF, name="Sam Staff")


@pytest.fixture
def adopter_user():
    return User(_id="user-1", email="ada@example.test", role=Role.ADOPTER, name="Ada", location="Austin")


@pytest.fixture
def staff_session(staff_user):
    return Session(token="staff-token", user=staff_user)


@pytest.fixture
def adopter_session(adopter_user):
    return Session(token="adopter-token", user=adopter_user)


@pytest.fixture
def mock_backend_client(staff_session):
    """BackendClient stand-in with every endpoint as an AsyncMock."""
    client = MagicMock(spec=BackendClient)
    client.session = staff_session
    client.update_adoption_status = AsyncMock(return_value={})
    client.update_foster_request = AsyncMock(return_value={})
    client.start_foster_chat = AsyncMock(return_value="thread-1")
    client.submit_foster_request = AsyncMock(return_value={})
    client.get_availability = AsyncMock(return_value=AvailabilitySnapshot(slots=[], version="v1"))
    client.replace_availability = AsyncMock(return_value=None)
    client.delete_availability = AsyncMock(return_value=None)
    client.list_vet_patients = AsyncMock(return_value=[])
    client.list_overdue_vaccinations = AsyncMock(return_value=[])
    client.count_upcoming_checkups = AsyncMock(return_value=0)
    client.get_medical_history = AsyncMock(return_value=([], []))
    client.add_medical_record = AsyncMock(return_value={})
    client.add_vaccination = AsyncMock(return_value={})
    return client


@pytest.fixture
def pending_adoption():
    """Adoption request waiting for staff review."""
    return AdoptionRequest.model_validate({
        "_id": "req-1",
        "status": "pending",
        "pet": {"_id": "pet-1", "name": "Biscuit"},
        "adopter": {"_id": "user-1", "name": "Ada"},
    })


@pytest.fixture
def approved_adoption(pending_adoption):
    data = pending_adoption.model_dump(by_alias=True)
    data["status"] = "approved"
    return AdoptionRequest.model_validate(data)


@pytest.fixture
def pending_foster():
    """Foster request on a personal listing."""
    return FosterRequest.model_validate({
        "_id": "freq-1",
        "pet": "listing-1",
        "user": {"_id": "user-2", "name": "Fran"},
        "message": "I have a big yard",
        "status": "pending",
    })


@pytest.fixture
def monday_morning_slot():
    return AvailabilitySlot(day="Monday", start_time="09:00", end_time="12:00")


@pytest.fixture
def weekly_slots():
    """A typical staff week."""
    return [
        AvailabilitySlot(_id="slot-1", day="Monday", start_time="09:00", end_time="12:00"),
        AvailabilitySlot(_id="slot-2", day="Monday", start_time="13:00", end_time="17:00"),
        AvailabilitySlot(_id="slot-3", day="Wednesday", start_time="10:00", end_time="14:30"),
    ]
