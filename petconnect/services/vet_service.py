"""Vet service - patient lists and medical history for the vet dashboard."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from petconnect.models.medical import MedicalRecord, Vaccination
from petconnect.models.pet import Pet
from petconnect.services.backend_client import BackendClient
from petconnect.utils.cancellation import CancellationToken
from petconnect.utils.errors import ValidationError
from petconnect.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class VetOverview(BaseModel):
    """Headline numbers on the vet dashboard."""
    patients: list[Pet] = Field(default_factory=list)
    overdue_vaccinations: list[Vaccination] = Field(default_factory=list)
    upcoming_checkups: int = 0

    @property
    def patient_count(self) -> int:
        return len(self.patients)


class MedicalHistory(BaseModel):
    records: list[MedicalRecord] = Field(default_factory=list)
    vaccinations: list[Vaccination] = Field(default_factory=list)


class VetService:

    def __init__(self, client: BackendClient):
        self.client = client

    async def overview(self, cancel_token: Optional[CancellationToken] = None) -> VetOverview:
        patients = await self.client.list_vet_patients(cancel_token=cancel_token)
        overdue = await self.client.list_overdue_vaccinations(cancel_token=cancel_token)
        upcoming = await self.client.count_upcoming_checkups(cancel_token=cancel_token)
        return VetOverview(patients=patients, overdue_vaccinations=overdue, upcoming_checkups=upcoming)

    async def patients(self, cancel_token: Optional[CancellationToken] = None) -> list[Pet]:
        return await self.client.list_vet_patients(cancel_token=cancel_token)

    async def overdue_vaccinations(self, cancel_token: Optional[CancellationToken] = None) -> list[Vaccination]:
        return await self.client.list_overdue_vaccinations(cancel_token=cancel_token)

    async def medical_history(
        self,
        pet_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> MedicalHistory:
        records, vaccinations = await self.client.get_medical_history(pet_id, cancel_token=cancel_token)
        return MedicalHistory(records=records, vaccinations=vaccinations)

    async def add_medical_record(
        self,
        pet_id: str,
        diagnosis: str,
        cancel_token: Optional[CancellationToken] = None,
        **details
    ) -> dict:
        """Record a visit. ``details`` are extra MedicalRecord fields (treatment, notes, urgency...)."""
        if not pet_id:
            raise ValidationError("Select a patient first")
        if not (diagnosis or "").strip():
            raise ValidationError("Diagnosis is required")
        record = MedicalRecord(diagnosis=diagnosis.strip(), **details)

        saved = await self.client.add_medical_record(pet_id, record, cancel_token=cancel_token)
        logger.info("Medical record added", pet_id=pet_id, urgency=record.urgency)
        return saved

    async def add_vaccination(
        self,
        pet_id: str,
        vaccine_name: str,
        date_administered: Optional[date],
        next_due_date: Optional[date],
        notes: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> dict:
        if not pet_id:
            raise ValidationError("Select a patient first")
        if not (vaccine_name or "").strip():
            raise ValidationError("Vaccine name is required")
        if date_administered is None or next_due_date is None:
            raise ValidationError("Administration and next due dates are required")
        if next_due_date < date_administered:
            raise ValidationError("Next due date cannot be before the administration date")

        vaccination = Vaccination(
            vaccine_name=vaccine_name.strip(),
            date_administered=date_administered,
            next_due_date=next_due_date,
            notes=notes,
        )
        saved = await self.client.add_vaccination(pet_id, vaccination, cancel_token=cancel_token)
        logger.info("Vaccination added", pet_id=pet_id, vaccine=vaccination.vaccine_name)
        return saved
