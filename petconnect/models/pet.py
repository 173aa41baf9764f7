"""Pet listing models."""

from typing import Any, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from petconnect.models.foster_request import FosterRequest


class PartyRef(BaseModel):
    """Embedded reference to an organization or user."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None


class ImageRef(BaseModel):
    url: Optional[str] = None
    is_primary: bool = Field(False, alias="isPrimary")


class PetRef(BaseModel):
    """Pet summary embedded in requests."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    breed: Optional[str] = None
    status: Optional[str] = None


def _ref_id(ref: Optional[Union[PartyRef, str]]) -> Optional[str]:
    if isinstance(ref, PartyRef):
        return ref.id
    return ref


class Pet(BaseModel):
    """Shelter pet (posted by an organization) or personal foster listing (posted by a user)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Pet ID")
    name: Optional[str] = Field(None, description="Pet name")
    breed: Optional[str] = None
    age: Optional[float] = None
    gender: Optional[str] = None
    status: Optional[str] = Field(None, description="Free-form status, e.g. Available, In Treatment, fostered")
    images: list[Union[ImageRef, str, None]] = Field(default_factory=list)
    organization: Optional[Union[PartyRef, str]] = Field(None, description="Posting organization")
    owner: Optional[Union[PartyRef, str]] = Field(
        None,
        validation_alias=AliasChoices("owner", "listedBy"),
        description="Posting user for personal listings",
    )
    trainer: Optional[Union[PartyRef, str]] = None
    vet: Optional[Union[PartyRef, str]] = None
    foster_requests: list[FosterRequest] = Field(default_factory=list, alias="fosterRequests")

    def model_post_init(self, __context: Any) -> None:
        """Validate that exactly one of organization or owner identifies the poster."""
        if (self.organization is None) == (self.owner is None):
            raise ValueError("Exactly one of organization or owner must be set")

    @property
    def owner_id(self) -> Optional[str]:
        return _ref_id(self.owner)

    @property
    def organization_id(self) -> Optional[str]:
        return _ref_id(self.organization)

    @property
    def is_personal_listing(self) -> bool:
        return self.owner is not None
