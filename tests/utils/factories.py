"""Test data factories using Faker."""

from faker import Faker
from typing import Optional
from datetime import timedelta

fake = Faker()


def _object_id() -> str:
    # Backend IDs are 24-char hex Mongo ObjectIds
    return fake.hexify(text="^" * 24)


def create_user_data(role: str = "adopter", user_id: Optional[str] = None) -> dict:
    """Create test user data as returned by /users/me."""
    return {
        "_id": user_id or _object_id(),
        "email": fake.email(),
        "name": fake.name(),
        "role": role,
        "location": fake.city(),
    }


def create_shelter_pet_data(status: str = "Available", organization_id: Optional[str] = None) -> dict:
    """Create a shelter pet posted by an organization."""
    return {
        "_id": _object_id(),
        "name": fake.first_name(),
        "breed": fake.random_element(["Labrador", "Beagle", "Siamese", "Tabby"]),
        "age": fake.random_int(min=1, max=14),
        "gender": fake.random_element(["male", "female"]),
        "status": status,
        "organization": {"_id": organization_id or _object_id(), "name": fake.company()},
    }


def create_personal_listing_data(
    owner_id: Optional[str] = None,
    status: str = "available_fostering",
    foster_requests: Optional[list] = None
) -> dict:
    """Create a personal foster listing posted by a user."""
    return {
        "_id": _object_id(),
        "name": fake.first_name(),
        "breed": fake.random_element(["Mixed", "Terrier", "Poodle"]),
        "status": status,
        "owner": {"_id": owner_id or _object_id(), "name": fake.name()},
        "fosterRequests": foster_requests or [],
    }


def create_adoption_request_data(status: str = "pending", pet_id: Optional[str] = None) -> dict:
    """Create adoption request data."""
    return {
        "_id": _object_id(),
        "status": status,
        "pet": {"_id": pet_id or _object_id(), "name": fake.first_name()},
        "adopter": {"_id": _object_id(), "name": fake.name(), "email": fake.email()},
        "createdAt": fake.date_time_this_year().isoformat(),
    }


def create_foster_request_data(status: str = "pending", pet_id: Optional[str] = None) -> dict:
    """Create foster request data."""
    return {
        "_id": _object_id(),
        "pet": pet_id or _object_id(),
        "user": {"_id": _object_id(), "name": fake.name(), "email": fake.email()},
        "message": fake.sentence(nb_words=8),
        "status": status,
    }


def create_slot_data(day: str = "Monday", start: str = "09:00", end: str = "12:00", with_id: bool = True) -> dict:
    """Create availability slot data in backend (camelCase) form."""
    data = {"day": day, "startTime": start, "endTime": end}
    if with_id:
        data["_id"] = _object_id()
    return data


def create_vaccination_data(status: str = "overdue") -> dict:
    administered = fake.date_between(start_date="-2y", end_date="-1y")
    return {
        "_id": _object_id(),
        "vaccineName": fake.random_element(["Rabies", "DHPP", "FVRCP"]),
        "dateAdministered": administered.isoformat(),
        "nextDueDate": (administered + timedelta(days=365)).isoformat(),
        "status": status,
    }
