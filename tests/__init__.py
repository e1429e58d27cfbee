# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Ship Paws API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py: Service rules against the fake Supabase client
# - test_handoff.py / test_stores.py: Redis hand-off buffer and client stores
# - test_api.py: Router tests through TestClient
#
# Run tests with: pytest
# =============================================================================
