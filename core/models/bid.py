# =============================================================================
# core/models/bid.py - Bid Schemas
# =============================================================================
# These models define the API contract for bidding:
# - BidCreate: A transporter's offer on a request
# - Bid: A row of the bids table
# - BidStats: Transporter dashboard counters
# - PaymentSummary: What the owner pays if a bid is accepted
# =============================================================================

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class BidStatus(str, Enum):
    """
    Lifecycle of a bid.

    Flow: pending -> accepted   (owner accepts)
          pending -> declined   (owner declines, or another bid is accepted)
          pending -> withdrawn  (transporter withdraws)
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    WITHDRAWN = "withdrawn"


class BidCreate(BaseModel):
    """
    A transporter's offer.

    Price and both dates are required; they are optional here so the
    service can answer with the bid form's own message.

    Example:
        {
            "request_id": "550e8400-e29b-41d4-a716-446655440000",
            "price": 540.0,
            "pickup_date": "2026-11-03",
            "delivery_date": "2026-11-05",
            "message": "Climate-controlled van, two stops a day."
        }
    """

    request_id: UUID = Field(..., description="Transport request being bid on")
    price: float | None = Field(default=None, gt=0, description="Offered price in USD")
    pickup_date: date | None = None
    delivery_date: date | None = None
    message: str | None = Field(default=None, max_length=2000)


class Bid(BaseModel):
    """A row of the bids table."""

    id: UUID
    request_id: UUID
    transporter_id: UUID
    price: float
    pickup_date: date | None = None
    delivery_date: date | None = None
    message: str | None = None
    status: BidStatus = BidStatus.PENDING
    created_at: datetime | None = None


class BidStats(BaseModel):
    """Transporter dashboard counters."""

    total_bids: int = 0
    pending: int = 0
    accepted: int = 0
    win_rate: int = Field(default=0, ge=0, le=100, description="Accepted bids as a rounded percentage")


class PaymentSummary(BaseModel):
    """
    Checkout breakdown for an accepted bid.

    The platform fee is charged on top of the transporter's price.
    """

    bid_id: UUID
    bid_amount: float
    platform_fee: float
    total_amount: float
    fee_rate: float
