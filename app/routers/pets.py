# =============================================================================
# app/routers/pets.py - Pet Endpoints
# =============================================================================
# Pet onboarding (add several pets at once, or skip) and the owner's pet list.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import get_current_user, AuthUser
from core.models.pet import PetBatchCreate
from core.services.pet_service import PetService

router = APIRouter()


@router.post("", status_code=201)
async def add_pets(
    data: PetBatchCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Add one or more pets in a single insert.

    Returns the created pets and the next page: the explicit redirect,
    the quote form when a quote is waiting, or the dashboard.
    """
    return PetService.add_pets(user.id, data.pets, redirect=data.redirect)


@router.post("/skip")
async def skip_pets(
    user: AuthUser = Depends(get_current_user),
    redirect: Annotated[str | None, Query(description="Page to continue to")] = None,
):
    """Skip pet onboarding."""
    return PetService.skip_pets(user.id, redirect)


@router.get("")
async def list_pets(user: AuthUser = Depends(get_current_user)):
    """The caller's active pets, newest first."""
    pets = PetService.list_pets(user.id)
    return {"pets": pets, "count": len(pets)}


@router.delete("/{pet_id}")
async def delete_pet(
    pet_id: Annotated[UUID, Path(description="Pet UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Remove a pet from the caller's list (soft delete)."""
    pet = PetService.deactivate_pet(user.id, pet_id)
    return {"pet_id": str(pet_id), "is_active": pet.get("is_active", False)}
