# app/routers/workspace.py
from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.draft_repo import WorkspaceRepository
from app.repositories.user_repo import ProfileRepository
from app.schemas.customization import CommandRequest
from app.schemas.preview import PreviewRead
from app.schemas.user import ProfileRead
from app.schemas.workspace import AssetUploadRead, WorkspaceProductSelect, WorkspaceRead
from app.services.preview_service import build_preview
from app.services.workspace_service import WorkspaceService

router = APIRouter(tags=["Workspace"])

workspace_repo = WorkspaceRepository()
profile_repo = ProfileRepository()
service = WorkspaceService(workspace_repo, profile_repo)


@router.get("/workspace", response_model=WorkspaceRead)
def get_workspace(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Current design: selected product, customization and live preview.
    """
    return service.read(session, current_user.id)


@router.put("/workspace/product", response_model=WorkspaceRead)
def select_product(
    payload: WorkspaceProductSelect,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Select the product to design. The customization resets to defaults.
    """
    return service.select_product(session, current_user.id, payload.product_id)


@router.post("/workspace/commands", response_model=WorkspaceRead)
def apply_command(
    payload: CommandRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Apply one editor command:

      set_field, select_template, flip_side,
      link_profile, unlink_profile, set_canva_design
    """
    return service.apply(session, current_user.id, payload.command)


@router.get("/workspace/preview", response_model=PreviewRead)
def preview_workspace(
    show_back: bool | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Render the current design; `show_back` overrides the active side.
    """
    product, customization = service.current(session, current_user.id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Select a product first",
        )
    return build_preview(product, customization, show_back)


@router.post(
    "/workspace/assets/{slot}",
    response_model=AssetUploadRead,
    summary="Upload a logo or artwork image for the active side",
)
def upload_asset(
    slot: Literal["logo", "artwork"],
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Upload an image for the active side.

    - Accepts JPEG, PNG, WEBP (max 5MB).
    - Replaces (and cleans up) the previous image of that slot.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = file.file.read()
    return service.upload_asset(
        session=session,
        user_id=current_user.id,
        slot=slot,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )


@router.delete("/workspace", response_model=WorkspaceRead)
def reset_workspace(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Reset the design to defaults (the selected product is kept).
    """
    return service.reset(session, current_user.id)


@router.get("/profiles/me", response_model=list[ProfileRead])
def list_my_profiles(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Profiles the current user can link a product to.
    """
    return profile_repo.list_for_user(session, current_user.id)
