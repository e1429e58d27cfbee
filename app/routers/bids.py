# =============================================================================
# app/routers/bids.py - Owner-side Bid Endpoints
# =============================================================================
# Pet owners accept or decline bids on their requests and see what an
# accepted bid will cost.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from app.auth import get_current_user, AuthUser
from core.models.bid import PaymentSummary
from core.services.bid_service import BidService

router = APIRouter()


class AcceptBidRequest(BaseModel):
    """The request the bid is expected to belong to."""
    request_id: UUID = Field(..., example="550e8400-e29b-41d4-a716-446655440000")


class AcceptBidResponse(BaseModel):
    bid_id: str
    request_id: str
    bid_status: str
    request_status: str
    message: str


@router.post("/{bid_id}/accept", response_model=AcceptBidResponse)
async def accept_bid(
    bid_id: Annotated[UUID, Path(description="Bid UUID")],
    body: AcceptBidRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Accept a bid on one of the caller's active requests.

    The bid becomes accepted, the request matched and every other bid on
    the request declined. If a step fails part way, the response is a 500
    BID_ACCEPTANCE_INCOMPLETE listing the steps already applied.
    """
    return BidService.accept_bid(user.id, bid_id, body.request_id)


@router.post("/{bid_id}/decline")
async def decline_bid(
    bid_id: Annotated[UUID, Path(description="Bid UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Decline a pending bid on one of the caller's requests."""
    return BidService.decline_bid(user.id, bid_id)


@router.get("/{bid_id}/payment-summary", response_model=PaymentSummary)
async def payment_summary(
    bid_id: Annotated[UUID, Path(description="Bid UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Bid amount, platform fee and total for checkout."""
    return BidService.payment_summary(user.id, bid_id)
