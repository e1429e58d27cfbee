# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - profile.py: Marketplace profiles and user types
# - pet.py: Pets registered during pet onboarding
# - transport_request.py: Quote forms, requests and transporter filters
# - bid.py: Bids, bid stats and payment summaries
# - transporter_application.py: The four-step transporter application
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Profile Models - Account onboarding
# -----------------------------------------------------------------------------
from .profile import (
    OnboardingResult,
    Profile,
    ProfileCreate,
    TransporterProfile,
    UserType,
)

# -----------------------------------------------------------------------------
# Pet Models - Pet onboarding
# -----------------------------------------------------------------------------
from .pet import (
    Pet,
    PetBatchCreate,
    PetInput,
    Species,
    WeightUnit,
)

# -----------------------------------------------------------------------------
# Transport Request Models - Quotes and the marketplace
# -----------------------------------------------------------------------------
from .transport_request import (
    BudgetBand,
    DateBand,
    HeroQuoteForm,
    PetSize,
    QuoteRequestForm,
    RequestFilters,
    RequestStatus,
    TimePreference,
    TransportRequest,
    Urgency,
)

# -----------------------------------------------------------------------------
# Bid Models
# -----------------------------------------------------------------------------
from .bid import (
    Bid,
    BidCreate,
    BidStats,
    BidStatus,
    PaymentSummary,
)

# -----------------------------------------------------------------------------
# Transporter Application Models
# -----------------------------------------------------------------------------
from .transporter_application import (
    APPLICATION_STEPS,
    REQUIRED_DOCUMENTS,
    ApplicationStepResult,
    ApplicationSubmitted,
    DocumentKind,
    TransporterApplication,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Profile
    "OnboardingResult",
    "Profile",
    "ProfileCreate",
    "TransporterProfile",
    "UserType",
    # Pet
    "Pet",
    "PetBatchCreate",
    "PetInput",
    "Species",
    "WeightUnit",
    # Transport request
    "BudgetBand",
    "DateBand",
    "HeroQuoteForm",
    "PetSize",
    "QuoteRequestForm",
    "RequestFilters",
    "RequestStatus",
    "TimePreference",
    "TransportRequest",
    "Urgency",
    # Bid
    "Bid",
    "BidCreate",
    "BidStats",
    "BidStatus",
    "PaymentSummary",
    # Transporter application
    "APPLICATION_STEPS",
    "REQUIRED_DOCUMENTS",
    "ApplicationStepResult",
    "ApplicationSubmitted",
    "DocumentKind",
    "TransporterApplication",
]
