# =============================================================================
# core/models/profile.py - Profile Schemas
# =============================================================================
# These models define the API contract for account onboarding:
# - UserType: which side of the marketplace a user is on
# - ProfileCreate: Input for the onboarding form
# - Profile: A row of the profiles table
# - TransporterProfile: A row of the transporter_profiles table
#
# Rows are created by the onboarding flow; the table schema itself lives
# in Supabase.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class UserType(str, Enum):
    """
    Marketplace role of a user, as stored in profiles.user_type.

    - pet_owner: Posts transport requests and accepts bids
    - transporter: Bids on transport requests (after admin approval)
    """
    PET_OWNER = "pet_owner"
    TRANSPORTER = "transporter"


class ProfileCreate(BaseModel):
    """
    Schema for the onboarding form.

    Company name and vehicle type are only kept for transporters.

    Example:
        {
            "user_type": "pet_owner",
            "first_name": "Maya",
            "last_name": "Lopez",
            "phone": "512-555-0182"
        }
    """

    user_type: UserType = Field(
        ...,
        description="Which side of the marketplace the user is joining"
    )

    first_name: str = Field(
        ...,
        max_length=100,
        description="First name (blank is treated as missing)"
    )

    last_name: str = Field(
        ...,
        max_length=100,
        description="Last name (blank is treated as missing)"
    )

    phone: str | None = Field(
        default=None,
        max_length=40,
        description="Contact phone number"
    )

    company_name: str | None = Field(
        default=None,
        max_length=200,
        description="Transporter business name"
    )

    vehicle_type: str | None = Field(
        default=None,
        max_length=100,
        description="Transporter vehicle type"
    )

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return value.strip() if isinstance(value, str) else value


class Profile(BaseModel):
    """A marketplace profile, keyed by the auth user's id."""

    id: UUID
    user_type: UserType
    first_name: str
    last_name: str
    phone: str | None = None
    company_name: str | None = None
    vehicle_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TransporterProfile(BaseModel):
    """
    Transporter-specific details.

    Created with is_approved=False during onboarding, filled in by the
    transporter application, and approved by an admin.
    """

    id: UUID
    business_name: str | None = None
    license_number: str | None = None
    insurance_company: str | None = None
    insurance_policy: str | None = None
    vehicle_type: str | None = None
    vehicle_capacity: str | None = None
    service_radius: int = Field(default=50, ge=0)
    base_rate: float | None = Field(default=None, ge=0)
    rate_per_mile: float | None = Field(default=None, ge=0)
    stripe_account_id: str | None = None
    is_approved: bool = False
    created_at: datetime | None = None


class OnboardingResult(BaseModel):
    """Response after creating a profile: the row plus where to go next."""

    profile: Profile
    transporter_profile: TransporterProfile | None = None
    redirect: str = Field(..., description="Next page in the onboarding flow")
