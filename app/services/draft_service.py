# app/services/draft_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.catalog import get_product
from app.database import commit_or_503
from app.models.draft import Draft
from app.repositories.draft_repo import DraftRepository
from app.schemas.customization import DesignCustomization
from app.schemas.draft import DraftCreate, DraftRead, DraftUpdate
from app.schemas.product import Product
from app.schemas.workspace import WorkspaceRead
from app.services.migration import decode_customization, is_legacy, swatch_color
from app.services.workspace_service import WorkspaceService


def format_draft_date(moment: datetime) -> str:
    """'Oct 18, 2026' style date used in default draft names."""
    return f"{moment:%b} {moment.day}, {moment.year}"


def default_draft_name(product: Product, created_at: datetime) -> str:
    return f"{product.name} - {format_draft_date(created_at)}"


class DraftService:
    """
    Business logic for saved drafts.

    Responsibilities:
      - owner-scoped list / save / update / delete
      - default naming
      - migrating legacy records before they reach the editor
      - loading a draft into the workspace
    """

    def __init__(self, repo: DraftRepository, workspace_service: WorkspaceService):
        self.repo = repo
        self.workspace_service = workspace_service

    # ---- internal helpers ----

    def _get_owned(self, session: Session, user_id: uuid.UUID, draft_id: uuid.UUID) -> Draft:
        draft = self.repo.get_by_id(session, draft_id)
        if not draft or draft.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Draft not found",
            )
        return draft

    @staticmethod
    def _catalog_product(product_id: str) -> Product:
        product = get_product(product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _workspace_design(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: str | None,
        detail: str,
    ) -> tuple[Product | None, DesignCustomization]:
        """
        Current workspace design, refused (400) when the workspace is on a
        different product than `product_id`.
        """
        ws_product, customization = self.workspace_service.current(session, user_id)
        if product_id is not None and (ws_product is None or ws_product.id != product_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=detail,
            )
        return ws_product, customization

    def _resolve_design(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: str | None,
        customization: DesignCustomization | None,
    ) -> tuple[Product | None, DesignCustomization]:
        """
        Explicit values win; anything omitted comes from the workspace.
        """
        if customization is None:
            ws_product, customization = self._workspace_design(
                session, user_id, product_id, "Select this product in the workspace before saving its design"
            )
            if product_id is None and ws_product is not None:
                product_id = ws_product.id

        product = self._catalog_product(product_id) if product_id is not None else None
        return product, customization

    @staticmethod
    def to_read(draft: Draft) -> DraftRead:
        raw = draft.customization
        return DraftRead(
            id=draft.id,
            user_id=draft.user_id,
            product_id=draft.product_id,
            product_name=draft.product_name,
            name=draft.name,
            customization=decode_customization(raw, context=f"draft {draft.id}"),
            legacy=is_legacy(raw),
            swatch_color=swatch_color(raw),
            created_at=draft.created_at,
            updated_at=draft.updated_at,
        )

    # ---- public operations ----

    def list_drafts(self, session: Session, user_id: uuid.UUID) -> list[DraftRead]:
        """Drafts of the user, most recently updated first."""
        return [self.to_read(d) for d in self.repo.list_for_user(session, user_id)]

    def get_draft(self, session: Session, user_id: uuid.UUID, draft_id: uuid.UUID) -> DraftRead:
        return self.to_read(self._get_owned(session, user_id, draft_id))

    def save_draft(self, session: Session, user_id: uuid.UUID, payload: DraftCreate) -> DraftRead:
        """
        Always creates a new draft row.

        Name defaults to "<product name> - <creation date>".
        """
        product, customization = self._resolve_design(
            session, user_id, payload.product_id, payload.customization
        )
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Select a product before saving a draft",
            )

        now = datetime.now(timezone.utc)
        draft = Draft(
            user_id=user_id,
            product_id=product.id,
            product_name=product.name,
            customization=customization.to_json(),
            name=payload.name or default_draft_name(product, now),
            created_at=now,
            updated_at=now,
        )
        session.add(draft)
        commit_or_503(session, "save draft")
        session.refresh(draft)
        return self.to_read(draft)

    def update_draft(
        self,
        session: Session,
        user_id: uuid.UUID,
        draft_id: uuid.UUID,
        payload: DraftUpdate,
    ) -> DraftRead:
        """
        Overwrite an existing draft in place (same id, fresh updated_at).

        The product never changes. Without a customization in the payload
        the workspace design is saved, matching the "edit draft" flow; the
        workspace must then be on the draft's product.
        The name is kept unless a new one is given.
        """
        draft = self._get_owned(session, user_id, draft_id)
        customization = payload.customization
        if customization is None:
            _, customization = self._workspace_design(
                session, user_id, draft.product_id, "Load this draft before updating it"
            )

        draft.customization = customization.to_json()
        if payload.name is not None:
            draft.name = payload.name
        elif not draft.name:
            product = get_product(draft.product_id)
            if product is not None:
                draft.name = default_draft_name(product, draft.created_at)
        draft.updated_at = datetime.now(timezone.utc)

        session.add(draft)
        commit_or_503(session, "update draft")
        session.refresh(draft)
        return self.to_read(draft)

    def delete_draft(self, session: Session, user_id: uuid.UUID, draft_id: uuid.UUID) -> None:
        draft = self._get_owned(session, user_id, draft_id)
        session.delete(draft)
        commit_or_503(session, "delete draft")

    def load_draft(self, session: Session, user_id: uuid.UUID, draft_id: uuid.UUID) -> WorkspaceRead:
        """
        Resume a draft: migrate it and make it the workspace design.
        """
        draft = self._get_owned(session, user_id, draft_id)
        product = self._catalog_product(draft.product_id)
        customization = decode_customization(draft.customization, context=f"draft {draft.id}")
        return self.workspace_service.replace(session, user_id, product, customization)
