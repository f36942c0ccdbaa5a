# app/routers/drafts.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.draft_repo import DraftRepository, WorkspaceRepository
from app.repositories.user_repo import ProfileRepository
from app.schemas.draft import DraftCreate, DraftRead, DraftUpdate
from app.schemas.workspace import WorkspaceRead
from app.services.draft_service import DraftService
from app.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/drafts", tags=["Drafts"])

draft_repo = DraftRepository()
workspace_service = WorkspaceService(WorkspaceRepository(), ProfileRepository())
service = DraftService(draft_repo, workspace_service)


@router.get("", response_model=list[DraftRead])
def list_drafts(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    List the current user's drafts, most recently updated first.

    Legacy records are returned already migrated.
    """
    return service.list_drafts(session, current_user.id)


@router.post("", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
def save_draft(
    payload: DraftCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Save a new draft (from the body, or from the current workspace).
    """
    return service.save_draft(session, current_user.id, payload)


@router.get("/{draft_id}", response_model=DraftRead)
def get_draft(
    draft_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.get_draft(session, current_user.id, draft_id)


@router.put("/{draft_id}", response_model=DraftRead)
def update_draft(
    draft_id: uuid.UUID,
    payload: DraftUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Overwrite an existing draft in place.
    """
    return service.update_draft(session, current_user.id, draft_id, payload)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_draft(
    draft_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.delete_draft(session, current_user.id, draft_id)
    return None


@router.post("/{draft_id}/load", response_model=WorkspaceRead)
def load_draft(
    draft_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Resume a draft: it becomes the current workspace design.
    """
    return service.load_draft(session, current_user.id, draft_id)
