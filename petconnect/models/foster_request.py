"""Foster request model."""

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from petconnect.models.status import FosterStatus


class FosterApplicant(BaseModel):
    """User who applied to foster a personally-listed pet."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    home_environment: Optional[str] = Field(None, alias="homeEnvironment")


class FosterRequest(BaseModel):
    """Application to temporarily house a personally-listed pet."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Foster request ID")
    pet_id: Optional[str] = Field(None, alias="pet", description="Listing the request targets")
    user: Optional[Union[FosterApplicant, str]] = Field(None, description="Requesting user (object or ID)")
    message: Optional[str] = Field(None, description="Applicant message")
    status: FosterStatus = Field(default=FosterStatus.PENDING, description="Foster status")
    submitted_at: Optional[datetime] = Field(None, alias="submittedAt")
    chat_thread: Optional[str] = Field(None, alias="chatThread", description="Chat thread ID once discussion started")

    @field_validator("pet_id", mode="before")
    @classmethod
    def unwrap_populated_pet(cls, value):
        # Populated responses carry the whole listing
        if isinstance(value, dict):
            return value.get("_id") or value.get("id")
        return value

    @property
    def user_id(self) -> Optional[str]:
        if isinstance(self.user, FosterApplicant):
            return self.user.id
        return self.user
