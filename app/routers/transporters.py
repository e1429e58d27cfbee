# =============================================================================
# app/routers/transporters.py - Transporter Application & Approval
# =============================================================================
# The four-step transporter application (draft saved between steps),
# document uploads, and the admin endpoints that approve transporters.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, UploadFile

from app.auth import get_admin_user, get_current_user, AuthUser
from core.models.transporter_application import (
    APPLICATION_STEPS,
    ApplicationStepResult,
    ApplicationSubmitted,
    DocumentKind,
    TransporterApplication,
)
from core.services.storage_service import StorageService
from core.services.transporter_service import TransporterService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Application wizard
# =============================================================================

@router.get("/application/draft")
async def get_draft(user: AuthUser = Depends(get_current_user)):
    """The saved draft (text fields only; documents are never saved here)."""
    draft = TransporterService.load_draft(user.id)
    return {"steps": APPLICATION_STEPS, "application": draft.model_dump(mode="json")}


@router.post("/application/steps/{step}", response_model=ApplicationStepResult)
async def complete_step(
    step: Annotated[int, Path(ge=1, le=len(APPLICATION_STEPS), description="Step number (1-4)")],
    application: TransporterApplication,
    user: AuthUser = Depends(get_current_user),
):
    """Validate one step, save the draft and return the next step."""
    return TransporterService.complete_step(user.id, step, application)


@router.post("/application/documents/{kind}", status_code=201)
async def upload_document(
    kind: Annotated[DocumentKind, Path(description="Which document this is")],
    file: Annotated[UploadFile, File(description="PDF, JPG or PNG")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload one application document.

    Put the returned path under documents[kind] when submitting.
    """
    content = await file.read()
    path = StorageService.upload_document(str(user.id), kind, file.filename, content)
    logger.info(f"Transporter {user.id} uploaded {kind.value}")
    return {"kind": kind.value, "path": path, "size_bytes": len(content)}


@router.get("/application/documents")
async def list_documents(user: AuthUser = Depends(get_current_user)):
    return {"documents": StorageService.list_documents(str(user.id))}


@router.post("/application/submit", response_model=ApplicationSubmitted)
async def submit_application(
    application: TransporterApplication,
    user: AuthUser = Depends(get_current_user),
):
    """
    Submit the whole application.

    Every step is validated again; the draft is cleared on success.
    The account stays pending until an admin approves it.
    """
    return TransporterService.submit_application(user.id, application)


# =============================================================================
# Admin
# =============================================================================

@router.get("/admin/pending")
async def list_pending(admin: AuthUser = Depends(get_admin_user)):
    """Transporters waiting for approval, oldest first."""
    pending = TransporterService.list_pending(admin.id)
    return {"transporters": pending, "count": len(pending)}


@router.post("/admin/{transporter_id}/approve")
async def approve_transporter(
    transporter_id: Annotated[UUID, Path(description="Transporter user UUID")],
    admin: AuthUser = Depends(get_admin_user),
):
    """Approve a transporter so they can bid."""
    return TransporterService.approve_transporter(admin.id, transporter_id)
