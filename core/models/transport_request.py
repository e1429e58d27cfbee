# =============================================================================
# core/models/transport_request.py - Transport Request Schemas
# =============================================================================
# These models define the API contract for quote requests:
# - QuoteRequestForm: The quote form (single page or multi-step wizard)
# - HeroQuoteForm: The short form visitors fill in before signing up
# - TransportRequest: A row of the transport_requests table
# - RequestFilters: Transporter-side browsing filters
#
# A transport request is a pet owner's job posting. Transporters bid on it
# while it is active; accepting a bid moves it to matched.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class RequestStatus(str, Enum):
    """
    Lifecycle of a transport request.

    Flow: active -> matched -> in_progress -> completed
          active -> cancelled
    """
    ACTIVE = "active"
    MATCHED = "matched"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PetSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra-large"


class TimePreference(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


class Urgency(str, Enum):
    STANDARD = "standard"
    URGENT = "urgent"
    FLEXIBLE = "flexible"


class QuoteRequestForm(BaseModel):
    """
    Quote request as entered by a pet owner.

    Every field is optional at the schema level so that partially filled
    wizard steps can be saved; RequestService checks the required ones and
    answers with the form's own messages.

    Example:
        {
            "origin_location": "Austin, TX 78701",
            "destination_location": "Denver, CO 80202",
            "pickup_date": "2026-11-03",
            "pet_name": "Biscuit",
            "pet_type": "dog",
            "pet_size": "medium",
            "budget": 650
        }
    """

    # Step 1 - route and dates
    origin_location: str | None = Field(default=None, max_length=255)
    destination_location: str | None = Field(default=None, max_length=255)
    pickup_date: date | None = None
    delivery_date: date | None = None
    flexible_dates: bool = False
    time_preference: TimePreference = TimePreference.ANYTIME

    # Step 2 - the pet
    pet_name: str | None = Field(default=None, max_length=100)
    pet_type: str | None = Field(default=None, max_length=50)
    pet_size: PetSize | None = None
    pet_weight: float | None = Field(default=None, gt=0)
    pet_age: int | None = Field(default=None, ge=0)
    special_needs: str | None = Field(default=None, max_length=2000)

    # Step 3 - budget and extras
    budget: float | None = Field(default=None, ge=0)
    urgency: Urgency = Urgency.STANDARD
    special_requirements: str | None = Field(default=None, max_length=2000)
    special_instructions: str | None = Field(default=None, max_length=2000)


class HeroQuoteForm(BaseModel):
    """
    The landing-page quick quote, filled in before the visitor has an account.

    Stashed in the hand-off buffer and merged into the full quote form after
    sign-up.
    """

    origin_location: str = Field(default="", max_length=255)
    destination_location: str = Field(default="", max_length=255)
    pickup_date: date | None = None
    pet_type: str | None = Field(default=None, max_length=50)


class TransportRequest(BaseModel):
    """A row of the transport_requests table."""

    id: UUID
    user_id: UUID
    origin_location: str
    destination_location: str
    pickup_date: date | None = None
    delivery_date: date | None = None
    pet_name: str | None = None
    pet_type: str
    pet_size: str
    pet_weight: float | None = None
    pet_age: int | None = None
    special_needs: str | None = None
    special_requirements: str | None = None
    special_instructions: str | None = None
    budget: float | None = None
    time_preference: str | None = None
    flexible_dates: bool = False
    urgency: str | None = None
    status: RequestStatus = RequestStatus.ACTIVE
    created_at: datetime | None = None
    bids: list[dict[str, Any]] = Field(default_factory=list)


class BudgetBand(str, Enum):
    """Budget filter on the transporter dashboard."""
    ALL = "all"
    LOW = "low"          # under 500
    MEDIUM = "medium"    # 500 - 1000 inclusive
    HIGH = "high"        # over 1000


class DateBand(str, Enum):
    """Pickup date filter, relative to today."""
    ALL = "all"
    WEEK = "week"        # within 7 days
    MONTH = "month"      # within 30 days
    LATER = "later"      # more than 30 days out


class RequestFilters(BaseModel):
    """Filters applied to the list of open requests a transporter sees."""

    location: str | None = Field(
        default=None,
        description="Case-insensitive substring of origin or destination"
    )
    pet_type: str | None = Field(default=None, description="Exact pet type, or None for all")
    budget: BudgetBand = BudgetBand.ALL
    pickup: DateBand = DateBand.ALL
    exclude_bid: bool = Field(
        default=False,
        description="Hide requests the transporter has already bid on"
    )
