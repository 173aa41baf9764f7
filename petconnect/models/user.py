"""User and session models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Platform roles."""
    ADOPTER = "adopter"
    STAFF = "staff"
    VET = "vet"
    TRAINER = "trainer"
    ADMIN = "admin"


class User(BaseModel):
    """Signed-in user snapshot as returned by /users/me or /auth/me."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="User ID")
    email: str = Field(..., description="Email address")
    role: Role = Field(default=Role.ADOPTER, description="Role: adopter, staff, vet, trainer, admin")
    name: Optional[str] = Field(None, description="Display name")
    location: Optional[str] = Field(None, description="Free-form location")
    adoption_status: Optional[str] = Field(None, alias="adoptionStatus", description="Adopter-level status override")
    favorited_pets: list[str] = Field(default_factory=list, alias="favoritedPets")
    created_at: Optional[str] = Field(None, alias="createdAt")

    @property
    def profile_incomplete(self) -> bool:
        return not self.name or not self.location

    @property
    def has_active_request(self) -> bool:
        return self.adoption_status == "active"


class Session(BaseModel):
    """Auth context handed explicitly to every operation that talks to the backend."""
    token: Optional[str] = Field(None, description="Backend-issued auth token")
    user: Optional[User] = Field(None, description="Cached user snapshot")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def has_role(self, *roles: Role) -> bool:
        return self.user is not None and self.user.role in roles

    def auth_headers(self, header_name: str = "x-auth-token") -> dict[str, str]:
        if not self.token:
            return {}
        return {header_name: self.token}

    def logout(self) -> None:
        self.token = None
        self.user = None
