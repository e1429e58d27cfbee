# =============================================================================
# app/routers/dashboard.py - Pet Owner Dashboard
# =============================================================================
# The transporter dashboard lives under /marketplace/dashboard.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/dashboard")
async def owner_dashboard(user: AuthUser = Depends(get_current_user)):
    """
    Requests with bids, pets and counters for a pet owner.

    Transporters get a 403 with redirect=/transporter-dashboard.
    """
    return DashboardService.owner_dashboard(user.id)
