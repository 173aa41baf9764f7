"""Tests for vet service."""

import pytest
from datetime import date
from petconnect.models.medical import Vaccination
from petconnect.services.vet_service import VetService
from petconnect.utils.errors import ValidationError
from tests.utils.factories import create_vaccination_data


@pytest.mark.unit
@pytest.mark.asyncio
async def test_overview(mock_backend_client):
    """Test the vet dashboard overview."""
    mock_backend_client.list_overdue_vaccinations.return_value = [
        Vaccination.model_validate(create_vaccination_data())
    ]
    mock_backend_client.count_upcoming_checkups.return_value = 3
    service = VetService(mock_backend_client)

    overview = await service.overview()

    assert overview.patient_count == 0
    assert len(overview.overdue_vaccinations) == 1
    assert overview.upcoming_checkups == 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_medical_record(mock_backend_client):
    """Test a medical record is built and posted."""
    service = VetService(mock_backend_client)

    await service.add_medical_record("p1", " Otitis ", treatment="Drops", urgency="high")

    pet_id, record = mock_backend_client.add_medical_record.await_args.args
    assert pet_id == "p1"
    assert record.diagnosis == "Otitis"
    assert record.urgency == "high"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_medical_record_requires_diagnosis(mock_backend_client):
    """Test the diagnosis is required."""
    service = VetService(mock_backend_client)

    with pytest.raises(ValidationError):
        await service.add_medical_record("p1", "  ")

    mock_backend_client.add_medical_record.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_vaccination(mock_backend_client):
    """Test a vaccination is posted."""
    service = VetService(mock_backend_client)

    await service.add_vaccination("p1", "Rabies", date(2025, 1, 1), date(2026, 1, 1))

    _, vaccination = mock_backend_client.add_vaccination.await_args.args
    assert vaccination.vaccine_name == "Rabies"
    assert vaccination.next_due_date == date(2026, 1, 1)


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("name,given,due", [
    ("", date(2025, 1, 1), date(2026, 1, 1)),
    ("Rabies", None, date(2026, 1, 1)),
    ("Rabies", date(2025, 1, 1), None),
    ("Rabies", date(2025, 1, 1), date(2024, 1, 1)),
])
async def test_vaccination_validation(mock_backend_client, name, given, due):
    """Test vaccination name and dates are required and ordered."""
    service = VetService(mock_backend_client)

    with pytest.raises(ValidationError):
        await service.add_vaccination("p1", name, given, due)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_medical_history(mock_backend_client):
    """Test medical history wraps records and vaccinations."""
    service = VetService(mock_backend_client)

    history = await service.medical_history("p1")

    assert history.records == []
    mock_backend_client.get_medical_history.assert_awaited_once_with("p1", cancel_token=None)
