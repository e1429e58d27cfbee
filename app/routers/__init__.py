# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - onboarding.py: Profile creation and landing page lookup
# - pets.py: Pet onboarding and the owner's pets
# - quote_requests.py: Quote form, quote wizard, owner's requests
# - handoff.py: Data entered before sign-up
# - marketplace.py: Transporter browsing and bidding
# - bids.py: Owner-side accept / decline / payment summary
# - transporters.py: Transporter application and admin approval
# - dashboard.py: Pet owner dashboard
# - state.py: Persisted client stores
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import onboarding
from . import pets
from . import quote_requests
from . import handoff
from . import marketplace
from . import bids
from . import transporters
from . import dashboard
from . import state

__all__ = [
    "health",
    "onboarding",
    "pets",
    "quote_requests",
    "handoff",
    "marketplace",
    "bids",
    "transporters",
    "dashboard",
    "state",
]
