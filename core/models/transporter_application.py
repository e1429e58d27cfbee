# =============================================================================
# core/models/transporter_application.py - Transporter Application Schemas
# =============================================================================
# The four-step application a transporter fills in before approval:
#   1. Personal & Business Info
#   2. Vehicle Information
#   3. Documents & Credentials
#   4. Review & Submit
#
# Text fields are saved as a draft between steps; uploaded documents are
# referenced by their storage path and never kept in the draft.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


APPLICATION_STEPS = [
    "Personal & Business Info",
    "Vehicle Information",
    "Documents & Credentials",
    "Review & Submit",
]


class DocumentKind(str, Enum):
    """Documents a transporter can upload."""
    DRIVERS_LICENSE = "drivers_license"
    INSURANCE = "insurance"
    USDA_CERTIFICATION = "usda_certification"
    VEHICLE_INSPECTION = "vehicle_inspection"


REQUIRED_DOCUMENTS = (DocumentKind.DRIVERS_LICENSE, DocumentKind.INSURANCE)


class TransporterApplication(BaseModel):
    """
    A transporter application, complete or in progress.

    Example (step 1 only):
        {
            "first_name": "Dana",
            "last_name": "Whitfield",
            "email": "dana@paws-on-wheels.com",
            "phone": "303-555-0144",
            "business_name": "Paws on Wheels"
        }
    """

    # Step 1 - Personal & Business Info
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=40)
    business_name: str = Field(default="", max_length=200)
    service_areas: str = Field(default="", max_length=1000)
    experience_years: str = Field(default="", max_length=10)

    # Step 2 - Vehicle Information
    vehicle_type: str = Field(default="", max_length=100)
    vehicle_make: str = Field(default="", max_length=100)
    vehicle_model: str = Field(default="", max_length=100)
    vehicle_year: str = Field(default="", max_length=4)
    climate_control: bool = False
    max_pet_capacity: str = Field(default="", max_length=10)
    special_accommodations: str = Field(default="", max_length=2000)

    # Step 3 - Documents & Credentials (storage paths, keyed by DocumentKind)
    documents: dict[DocumentKind, str] = Field(default_factory=dict)
    background_check_consent: bool = False

    # Step 4 - Review
    terms_accepted: bool = False

    def draft_fields(self) -> dict:
        """Everything except uploaded documents, for the hand-off draft."""
        return self.model_dump(mode="json", exclude={"documents"})


class ApplicationStepResult(BaseModel):
    """Response after validating a wizard step."""

    step: int
    step_name: str
    next_step: int
    total_steps: int = len(APPLICATION_STEPS)


class ApplicationSubmitted(BaseModel):
    """Response after submitting the application."""

    transporter_id: str
    is_approved: bool
    message: str
