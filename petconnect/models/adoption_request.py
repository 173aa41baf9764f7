"""Adoption request models."""

from datetime import datetime
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from petconnect.models.pet import PartyRef, PetRef
from petconnect.models.status import AdoptionStatus


class MeetingInfo(BaseModel):
    """Meeting attached to an adoption request."""
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[datetime] = Field(None, description="Meeting date and time")
    type: Optional[Literal["virtual", "in-person"]] = Field(None, description="virtual or in-person")
    confirmed: bool = Field(default=False)
    status: Optional[Literal["scheduled", "completed"]] = None
    location: Optional[str] = None
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")


class AdoptionRequest(BaseModel):
    """Formal application by an adopter to take a shelter-listed pet."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Adoption request ID")
    status: AdoptionStatus = Field(default=AdoptionStatus.PENDING, description="Adoption status")
    pet: Optional[Union[PetRef, str]] = Field(None, description="Requested pet (object or ID)")
    adopter: Optional[Union[PartyRef, str]] = Field(None, description="Adopter (object or ID)")
    meeting: Optional[MeetingInfo] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @property
    def pet_id(self) -> Optional[str]:
        if isinstance(self.pet, PetRef):
            return self.pet.id
        return self.pet

    @property
    def adopter_id(self) -> Optional[str]:
        if isinstance(self.adopter, PartyRef):
            return self.adopter.id
        return self.adopter
