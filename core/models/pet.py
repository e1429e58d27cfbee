# =============================================================================
# core/models/pet.py - Pet Schemas
# =============================================================================
# Pets registered by owners during pet onboarding (and later from the
# dashboard). Validation mirrors the pet onboarding form: name and species
# are required, weight must be a number, age months stay within 0-11.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class Species(str, Enum):
    """Species accepted by the pets table."""
    DOG = "dog"
    CAT = "cat"
    BIRD = "bird"
    RABBIT = "rabbit"
    FERRET = "ferret"
    REPTILE = "reptile"
    OTHER = "other"


class WeightUnit(str, Enum):
    LBS = "lbs"
    KG = "kg"


class PetInput(BaseModel):
    """
    One pet as typed into the pet onboarding form.

    Numeric fields arrive as strings from the form, so they are kept as
    strings here and checked by PetService.validate_pets, which produces
    the per-pet messages the form shows.

    Example:
        {"name": "Biscuit", "species": "dog", "age_years": "4", "weight": "32.5"}
    """

    name: str = Field(default="", max_length=100)
    species: Species | None = None
    age_years: str | None = None
    age_months: str | None = None
    weight: str | None = None
    weight_unit: WeightUnit = WeightUnit.LBS
    special_needs: str = Field(default="", max_length=2000)


class PetBatchCreate(BaseModel):
    """Request body for adding one or more pets at once."""

    pets: list[PetInput] = Field(..., min_length=1, max_length=20)
    redirect: str | None = Field(
        default=None,
        description="Page to continue to after the pets are saved"
    )


class Pet(BaseModel):
    """A row of the pets table."""

    id: UUID
    owner_id: UUID
    name: str
    species: Species
    age_years: int | None = None
    age_months: int | None = Field(default=None, ge=0, le=11)
    weight: float | None = None
    weight_unit: WeightUnit = WeightUnit.LBS
    special_needs: str | None = None
    photo_url: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
