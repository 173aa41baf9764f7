"""Tests for Pet model."""

import pytest
from pydantic import ValidationError
from petconnect.models.pet import Pet
from tests.utils.factories import create_personal_listing_data, create_shelter_pet_data


@pytest.mark.unit
def test_shelter_pet_valid():
    """Test a pet posted by an organization."""
    data = create_shelter_pet_data(organization_id="org-1")
    pet = Pet.model_validate(data)

    assert pet.organization_id == "org-1"
    assert pet.owner_id is None
    assert pet.is_personal_listing is False


@pytest.mark.unit
def test_personal_listing_valid():
    """Test a personal listing with embedded foster requests."""
    data = create_personal_listing_data(
        owner_id="user-9",
        foster_requests=[{"_id": "fr-1", "status": "pending", "user": "user-3"}],
    )
    pet = Pet.model_validate(data)

    assert pet.owner_id == "user-9"
    assert pet.is_personal_listing is True
    assert pet.foster_requests[0].user_id == "user-3"


@pytest.mark.unit
def test_listed_by_alias_sets_owner():
    """Test that listedBy is accepted as the owner field."""
    pet = Pet.model_validate({"_id": "p1", "name": "Rex", "listedBy": "user-4"})

    assert pet.owner_id == "user-4"


@pytest.mark.unit
def test_pet_requires_exactly_one_poster():
    """Test that a pet needs an organization or an owner, not both or neither."""
    with pytest.raises(ValueError, match="Exactly one of organization or owner"):
        Pet.model_validate({"_id": "p1", "name": "Nobody's"})

    with pytest.raises(ValueError, match="Exactly one of organization or owner"):
        Pet.model_validate({"_id": "p2", "organization": "org-1", "owner": "user-1"})


@pytest.mark.unit
def test_pet_missing_required_fields():
    """Test that the id is required."""
    with pytest.raises(ValidationError):
        Pet.model_validate({"name": "Rex", "organization": "org-1"})
