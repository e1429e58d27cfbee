# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .profile_service import ProfileService
from .pet_service import PetService
from .request_service import RequestService
from .transporter_service import TransporterService
from .bid_service import BidService
from .handoff_service import HandoffService
from .storage_service import StorageService
from .dashboard_service import DashboardService

__all__ = [
    "ProfileService",
    "PetService",
    "RequestService",
    "TransporterService",
    "BidService",
    "HandoffService",
    "StorageService",
    "DashboardService",
]
