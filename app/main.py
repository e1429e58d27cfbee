# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Ship Paws API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import ShipPawsException, shippaws_exception_handler
from app.routers import (
    bids,
    dashboard,
    handoff,
    health,
    marketplace,
    onboarding,
    pets,
    quote_requests,
    state,
    transporters,
)
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Supabase and Redis clients are created lazily on first use, so there
    is nothing to open here beyond logging the configuration.
    """
    logger.info(f"Starting Ship Paws API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.admin_user_ids_list:
        logger.warning("ADMIN_USER_IDS is empty; transporters cannot be approved")

    yield

    logger.info("Shutting down Ship Paws API")


# Create FastAPI application
app = FastAPI(
    title="Ship Paws API",
    description="""
## Pet Transport Marketplace API

Pet owners post transport requests; vetted transporters bid on them.

### How It Works

1. **Sign up** with Supabase Auth, then **create a profile** (pet owner or transporter)
2. Pet owners **add pets** and **request a quote**
3. Approved transporters **browse open requests** and **place bids**
4. The owner **accepts a bid**: the request is matched and competing bids are declined

### Quick Start

```bash
# 1. Create a profile
curl -X POST http://localhost:8000/api/v1/onboarding/profile \\
  -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\
  -d '{"user_type": "pet_owner", "first_name": "Maya", "last_name": "Lopez"}'

# 2. Request a quote
curl -X POST http://localhost:8000/api/v1/quote-requests \\
  -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\
  -d '{"origin_location": "Austin, TX", "destination_location": "Denver, CO",
       "pickup_date": "2026-11-03", "pet_type": "dog", "pet_size": "medium"}'

# 3. Accept a bid
curl -X POST http://localhost:8000/api/v1/bids/{bid_id}/accept \\
  -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\
  -d '{"request_id": "{request_id}"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Verify Supabase tokens and look up the signed-in user",
        },
        {
            "name": "Onboarding",
            "description": "Create a marketplace profile after sign-up",
        },
        {
            "name": "Pets",
            "description": "Pet onboarding and the owner's pets",
        },
        {
            "name": "Quote Requests",
            "description": "Post and manage transport requests",
        },
        {
            "name": "Handoff",
            "description": "Keep what a visitor entered across sign-up",
        },
        {
            "name": "Marketplace",
            "description": "Transporters browse requests and bid",
        },
        {
            "name": "Bids",
            "description": "Owners accept or decline bids",
        },
        {
            "name": "Transporters",
            "description": "Transporter application and admin approval",
        },
        {
            "name": "Dashboard",
            "description": "Pet owner dashboard",
        },
        {
            "name": "State",
            "description": "Persisted client stores",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ShipPawsException)
async def handle_shippaws_exception(request: Request, exc: ShipPawsException):
    """Handle custom Ship Paws exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message} {exc.details}")
    return await shippaws_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])

app.include_router(health.router, prefix="/api/v1", tags=["Health"])

app.include_router(onboarding.router, prefix="/api/v1/onboarding", tags=["Onboarding"])

app.include_router(pets.router, prefix="/api/v1/pets", tags=["Pets"])

app.include_router(quote_requests.router, prefix="/api/v1/quote-requests", tags=["Quote Requests"])

# Pre-sign-up hand-off (POST /anonymous needs no token)
app.include_router(handoff.router, prefix="/api/v1/handoff", tags=["Handoff"])

# Transporter side of the marketplace
app.include_router(marketplace.router, prefix="/api/v1/marketplace", tags=["Marketplace"])

# Owner side of bidding
app.include_router(bids.router, prefix="/api/v1/bids", tags=["Bids"])

app.include_router(transporters.router, prefix="/api/v1/transporters", tags=["Transporters"])

app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])

app.include_router(state.router, prefix="/api/v1/state", tags=["State"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Ship Paws API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
