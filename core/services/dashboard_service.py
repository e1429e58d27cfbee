# =============================================================================
# core/services/dashboard_service.py - Dashboard Aggregates
# =============================================================================
# Everything the owner dashboard and the transporter dashboard show on load,
# in one call each.
# =============================================================================

import logging
from datetime import date
from typing import Any
from uuid import UUID

from lib.utils import normalize_uuid
from core.models.profile import UserType
from core.models.transport_request import RequestFilters, RequestStatus
from core.services.bid_service import BidService
from core.services.pet_service import PetService
from core.services.profile_service import ProfileService
from core.services.request_service import RequestService
from core.services.transporter_service import TransporterService

logger = logging.getLogger(__name__)


class DashboardService:

    @staticmethod
    def owner_dashboard(user_id: UUID | str) -> dict[str, Any]:
        """
        Requests (with bids), pets and counters for a pet owner.

        Raises:
            OnboardingRequiredError: No profile yet
            WrongUserTypeError: Transporters are sent to their own dashboard
        """
        user_id_str = normalize_uuid(user_id)
        profile = ProfileService.require_user_type(
            user_id_str,
            UserType.PET_OWNER,
            message="Transporters have their own dashboard.",
            redirect="/transporter-dashboard",
        )

        requests = RequestService.list_owner_requests(user_id_str)
        pets = PetService.list_pets(user_id_str)

        return {
            "profile": profile,
            "requests": requests,
            "pets": pets,
            "counts": {
                "active": sum(1 for r in requests if r.get("status") == RequestStatus.ACTIVE.value),
                "completed": sum(1 for r in requests if r.get("status") == RequestStatus.COMPLETED.value),
                "pets": len(pets),
            },
        }

    @staticmethod
    def transporter_dashboard(
        user_id: UUID | str,
        filters: RequestFilters | None = None,
        today: date | None = None,
    ) -> dict[str, Any]:
        """
        Open requests, own bids and bid stats for an approved transporter.

        Raises:
            TransporterNotApprovedError (and other access errors): via check_status
        """
        user_id_str = normalize_uuid(user_id)
        transporter = TransporterService.check_status(user_id_str)

        available = RequestService.list_available_requests(user_id_str, filters, today=today)
        bids = BidService.list_my_bids(user_id_str)

        logger.debug(f"Transporter dashboard for {user_id_str}: {len(available)} open, {len(bids)} bids")
        return {
            "transporter": transporter,
            "available_requests": available,
            "my_bids": bids,
            "stats": BidService.compute_stats(bids),
        }
