# =============================================================================
# app/routers/marketplace.py - Transporter Marketplace Endpoints
# =============================================================================
# The transporter side: browse open requests, place bids, follow them.
# Every endpoint requires an approved transporter.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user, AuthUser
from app.dependencies import FiltersDep, TodayDep
from core.models.bid import BidCreate, BidStats
from core.services.bid_service import BidService
from core.services.dashboard_service import DashboardService
from core.services.request_service import RequestService
from core.services.transporter_service import TransporterService

router = APIRouter()


@router.get("/status")
async def transporter_status(user: AuthUser = Depends(get_current_user)):
    """
    Check the caller may use the marketplace.

    403 with redirect=/transporters/onboard while approval is pending.
    """
    transporter = TransporterService.check_status(user.id)
    return {"approved": True, "transporter": transporter}


@router.get("/dashboard")
async def transporter_dashboard(
    filters: FiltersDep,
    today: TodayDep,
    user: AuthUser = Depends(get_current_user),
):
    """Open requests (filtered), the caller's bids and bid stats in one call."""
    return DashboardService.transporter_dashboard(user.id, filters, today=today)


@router.get("/requests")
async def list_available_requests(
    filters: FiltersDep,
    today: TodayDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Active requests, newest first, each with the caller's existing_bid.

    Filters: location, pet_type, budget (low/medium/high), pickup
    (week/month/later) and exclude_bid.
    """
    TransporterService.check_status(user.id)
    requests = RequestService.list_available_requests(user.id, filters, today=today)
    return {"requests": requests, "count": len(requests)}


@router.post("/bids", status_code=201)
async def submit_bid(
    data: BidCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Place a bid on an active request."""
    bid = BidService.submit_bid(user.id, data)
    return {"bid": bid, "message": "Bid submitted successfully!"}


@router.get("/bids/mine")
async def list_my_bids(user: AuthUser = Depends(get_current_user)):
    """The caller's bids with request summaries, plus stats."""
    TransporterService.check_status(user.id)
    bids = BidService.list_my_bids(user.id)
    return {"bids": bids, "stats": BidStats(**BidService.compute_stats(bids))}


@router.post("/bids/{bid_id}/withdraw")
async def withdraw_bid(
    bid_id: Annotated[UUID, Path(description="Bid UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Withdraw one of the caller's pending bids."""
    return BidService.withdraw_bid(user.id, bid_id)
