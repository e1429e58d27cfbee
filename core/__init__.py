# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Marketplace operations on top of Supabase
# - stores/: Client state containers persisted to the hand-off buffer
#
# Code in this package should NOT import from FastAPI.
# Errors are the shared exception classes from app.exceptions.
# =============================================================================
