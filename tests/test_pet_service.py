# =============================================================================
# tests/test_pet_service.py - Pet Onboarding Tests
# =============================================================================

import pytest

from app.exceptions import (
    DatabaseOperationError,
    FormValidationError,
    PetNotFoundError,
    WrongUserTypeError,
)
from core.models.pet import PetInput
from core.services.pet_service import PetService
from lib.handoff import PENDING_QUOTE_REQUEST, HandoffBuffer
from tests.conftest import OWNER_ID, PET_ID, TRANSPORTER_ID


class TestValidatePets:
    """Per-pet form messages."""

    def test_missing_species_names_pet_number(self):
        pets = [PetInput(name="Biscuit", species="dog"), PetInput(name="Tofu")]

        with pytest.raises(FormValidationError) as exc_info:
            PetService.validate_pets(OWNER_ID, pets)

        assert exc_info.value.message == "Please fill in the name and species for pet 2"

    @pytest.mark.parametrize("weight", ["heavy", "nan", "inf", "-inf", "-12", "0"])
    def test_bad_weight(self, weight):
        with pytest.raises(FormValidationError) as exc_info:
            PetService.validate_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog", weight=weight)])

        assert exc_info.value.message == "Please enter a valid weight for Biscuit"

    def test_weight_parsed(self):
        rows = PetService.validate_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog", weight=" 42.5 ")])
        assert rows[0]["weight"] == 42.5

    def test_negative_age(self):
        with pytest.raises(FormValidationError) as exc_info:
            PetService.validate_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog", age_years="-1")])

        assert exc_info.value.message == "Please enter a valid age for Biscuit"

    @pytest.mark.parametrize("months", ["12", "-1", "six"])
    def test_age_months_out_of_range(self, months):
        with pytest.raises(FormValidationError) as exc_info:
            PetService.validate_pets(OWNER_ID, [PetInput(name="Tofu", species="cat", age_months=months)])

        assert exc_info.value.message == "Age months must be between 0-11 for Tofu"

    def test_rows_trimmed_and_typed(self):
        rows = PetService.validate_pets(OWNER_ID, [
            PetInput(name="  Biscuit ", species="dog", age_years="4", age_months="", weight="32.5",
                     special_needs="   "),
        ])

        assert rows == [{
            "owner_id": OWNER_ID,
            "name": "Biscuit",
            "species": "dog",
            "age_years": 4,
            "age_months": None,
            "weight": 32.5,
            "weight_unit": "lbs",
            "special_needs": None,
            "is_active": True,
        }]


class TestAddPets:

    def test_single_bulk_insert(self, fake_supabase, owner_profile):
        """All pets go in one insert call."""
        pets = [PetInput(name="Biscuit", species="dog"), PetInput(name="Tofu", species="cat")]

        result = PetService.add_pets(OWNER_ID, pets)

        inserts = fake_supabase.calls("pets", "insert")
        assert len(inserts) == 1
        assert [row["name"] for row in inserts[0].payload] == ["Biscuit", "Tofu"]
        assert result["redirect"] == "/dashboard?success=onboarding-complete"

    def test_pending_quote_redirects_and_stays(self, owner_profile):
        """The waiting quote is left for the quote page to resume."""
        HandoffBuffer.put(PENDING_QUOTE_REQUEST, OWNER_ID, {"origin_location": "Austin"})

        result = PetService.add_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog")])

        assert result["redirect"] == "/request-quote"
        assert HandoffBuffer.exists(PENDING_QUOTE_REQUEST, OWNER_ID)

    def test_explicit_redirect_wins(self, owner_profile):
        HandoffBuffer.put(PENDING_QUOTE_REQUEST, OWNER_ID, {"origin_location": "Austin"})

        result = PetService.add_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog")], redirect="/pets")

        assert result["redirect"] == "/pets"

    def test_transporters_cannot_add_pets(self, transporter_profile, fake_supabase):
        with pytest.raises(WrongUserTypeError):
            PetService.add_pets(TRANSPORTER_ID, [PetInput(name="Biscuit", species="dog")])

        assert fake_supabase.writes() == []

    def test_insert_failure_message(self, fake_supabase, owner_profile):
        fake_supabase.queue("pets", "insert", Exception("value too long"))

        with pytest.raises(DatabaseOperationError) as exc_info:
            PetService.add_pets(OWNER_ID, [PetInput(name="Biscuit", species="dog")])

        assert exc_info.value.message == "Error adding your pets: value too long"


class TestSkipAndList:

    def test_skip_defaults_to_dashboard(self):
        assert PetService.skip_pets(OWNER_ID)["redirect"] == "/dashboard"

    def test_skip_with_pending_quote(self):
        HandoffBuffer.put(PENDING_QUOTE_REQUEST, OWNER_ID, {"origin_location": "Austin"})
        assert PetService.skip_pets(OWNER_ID)["redirect"] == "/request-quote"

    def test_list_pets_filters_active_newest_first(self, fake_supabase):
        fake_supabase.queue("pets", "select", [{"id": PET_ID, "name": "Biscuit"}])

        pets = PetService.list_pets(OWNER_ID)

        query = fake_supabase.calls("pets", "select")[0]
        assert query.filters() == {"owner_id": OWNER_ID, "is_active": True}
        assert ("order", ("created_at",), {"desc": True}) in query.ops
        assert pets == [{"id": PET_ID, "name": "Biscuit"}]


class TestDeactivatePet:

    def test_soft_delete(self, fake_supabase):
        fake_supabase.add_row("pets", {"id": PET_ID, "owner_id": OWNER_ID, "is_active": True})

        pet = PetService.deactivate_pet(OWNER_ID, PET_ID)

        update = fake_supabase.calls("pets", "update")[0]
        assert update.payload == {"is_active": False}
        assert pet["is_active"] is False

    def test_other_owners_pet_not_found(self, fake_supabase):
        fake_supabase.add_row("pets", {"id": PET_ID, "owner_id": TRANSPORTER_ID, "is_active": True})

        with pytest.raises(PetNotFoundError):
            PetService.deactivate_pet(OWNER_ID, PET_ID)
