"""Medical record and vaccination models used by the vet dashboard."""

from datetime import date as date_type
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from petconnect.models.pet import PetRef


class Medication(BaseModel):
    name: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None


class MedicalRecord(BaseModel):
    """Vet visit record."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    pet: Optional[Union[PetRef, str]] = None
    date: Optional[str] = Field(None, description="Visit date (ISO)")
    diagnosis: str = Field(..., min_length=1, description="Diagnosis")
    treatment: Optional[str] = None
    medications: list[Medication] = Field(default_factory=list)
    notes: Optional[str] = None
    urgency: Literal["low", "medium", "high", "critical"] = Field(default="medium")
    next_checkup: Optional[date_type] = Field(None, alias="nextCheckup")


class Vaccination(BaseModel):
    """Vaccination entry; status is computed by the backend."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    pet: Optional[Union[PetRef, str]] = None
    vaccine_name: str = Field(..., min_length=1, alias="vaccineName")
    date_administered: date_type = Field(..., alias="dateAdministered")
    next_due_date: date_type = Field(..., alias="nextDueDate")
    notes: Optional[str] = None
    status: Literal["completed", "pending", "overdue"] = Field(default="pending")

    @property
    def pet_id(self) -> Optional[str]:
        if isinstance(self.pet, PetRef):
            return self.pet.id
        return self.pet
