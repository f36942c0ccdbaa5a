# app/repositories/draft_repo.py
import uuid

from sqlmodel import Session, select

from app.models.draft import Draft, DesignWorkspace


class DraftRepository:
    """
    Data access layer for nfc_product_drafts.

    - Pure DB queries; writes are committed by DraftService so that
      store failures map to a retryable error.
    """

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Draft]:
        stmt = (
            select(Draft)
            .where(Draft.user_id == user_id)
            .order_by(Draft.updated_at.desc())
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, draft_id: uuid.UUID) -> Draft | None:
        return session.get(Draft, draft_id)


class WorkspaceRepository:
    """
    Data access layer for design_workspaces (one row per user).

    NOTE:
      - save() does not commit; checkout resets the workspace inside the
        order transaction, so the service decides when to commit.
    """

    def get(self, session: Session, user_id: uuid.UUID) -> DesignWorkspace | None:
        return session.get(DesignWorkspace, user_id)

    def save(self, session: Session, workspace: DesignWorkspace) -> DesignWorkspace:
        session.add(workspace)
        return workspace
