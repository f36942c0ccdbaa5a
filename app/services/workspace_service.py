# app/services/workspace_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.catalog import get_product
from app.core.storage_utils import delete_public_url, generate_filename, upload_to_storage
from app.database import commit_or_503
from app.models.draft import DesignWorkspace
from app.repositories.draft_repo import WorkspaceRepository
from app.repositories.user_repo import ProfileRepository
from app.schemas.customization import (
    DesignCustomization,
    EditorCommand,
    LinkProfile,
    default_customization,
)
from app.schemas.product import Product, ProductRead
from app.schemas.workspace import AssetUploadRead, WorkspaceRead
from app.services.editor import EditorError, apply_command, update_active_side_field
from app.services.migration import decode_customization
from app.services.preview_service import build_preview

logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

# Upload slot -> side field it feeds
ASSET_FIELDS: dict[str, str] = {
    "logo": "logo_url",
    "artwork": "custom_artwork_url",
}


def product_read(product: Product) -> ProductRead:
    return ProductRead(**product.model_dump(), supports_back=product.two_sided)


class WorkspaceService:
    """
    The per-user design being edited.

    Responsibilities:
      - selected product and its DesignCustomization (persisted)
      - routing every mutation through the editor reducer
      - logo / artwork uploads with the stale-response guard
      - reset after checkout
    """

    def __init__(self, workspace_repo: WorkspaceRepository, profile_repo: ProfileRepository):
        self.workspace_repo = workspace_repo
        self.profile_repo = profile_repo

    # ---- internal helpers ----

    def _get_or_create(self, session: Session, user_id: uuid.UUID) -> DesignWorkspace:
        workspace = self.workspace_repo.get(session, user_id)
        if workspace is None:
            workspace = DesignWorkspace(
                user_id=user_id,
                customization=default_customization().to_json(),
            )
        return workspace

    @staticmethod
    def _product_of(workspace: DesignWorkspace) -> Product | None:
        if workspace.product_id is None:
            return None
        return get_product(workspace.product_id)

    @staticmethod
    def _customization_of(workspace: DesignWorkspace) -> DesignCustomization:
        return decode_customization(workspace.customization, context=f"workspace {workspace.user_id}")

    def _require_product(self, workspace: DesignWorkspace) -> Product:
        product = self._product_of(workspace)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Select a product first",
            )
        return product

    def _write(
        self,
        session: Session,
        workspace: DesignWorkspace,
        customization: DesignCustomization,
        product_id: str | None = None,
    ) -> DesignWorkspace:
        if product_id is not None:
            workspace.product_id = product_id
        workspace.customization = customization.to_json()
        workspace.updated_at = datetime.now(timezone.utc)
        return self.workspace_repo.save(session, workspace)

    def _to_read(self, workspace: DesignWorkspace) -> WorkspaceRead:
        product = self._product_of(workspace)
        customization = self._customization_of(workspace)
        return WorkspaceRead(
            product=product_read(product) if product else None,
            customization=customization,
            preview=build_preview(product, customization) if product else None,
            updated_at=workspace.updated_at,
        )

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if not file_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    # ---- state access used by other services ----

    def current(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> tuple[Product | None, DesignCustomization]:
        workspace = self._get_or_create(session, user_id)
        return self._product_of(workspace), self._customization_of(workspace)

    def replace(
        self,
        session: Session,
        user_id: uuid.UUID,
        product: Product,
        customization: DesignCustomization,
    ) -> WorkspaceRead:
        """Swap the workspace for a product + design (e.g. a loaded draft)."""
        workspace = self._get_or_create(session, user_id)
        self._write(session, workspace, customization, product_id=product.id)
        commit_or_503(session, "load the design")
        session.refresh(workspace)
        return self._to_read(workspace)

    def reset_pending(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Reset to defaults without committing (part of the checkout
        transaction). The selected product is kept.
        """
        workspace = self._get_or_create(session, user_id)
        self._write(session, workspace, default_customization())

    # ---- public operations ----

    def read(self, session: Session, user_id: uuid.UUID) -> WorkspaceRead:
        return self._to_read(self._get_or_create(session, user_id))

    def select_product(self, session: Session, user_id: uuid.UUID, product_id: str) -> WorkspaceRead:
        """
        Select a catalog product; the customization starts from defaults.
        """
        product = get_product(product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return self.replace(session, user_id, product, default_customization())

    def reset(self, session: Session, user_id: uuid.UUID) -> WorkspaceRead:
        workspace = self._get_or_create(session, user_id)
        self._write(session, workspace, default_customization())
        commit_or_503(session, "reset the design")
        session.refresh(workspace)
        return self._to_read(workspace)

    def apply(self, session: Session, user_id: uuid.UUID, command: EditorCommand) -> WorkspaceRead:
        """
        Apply one editor command to the current design.

        Raises:
            HTTPException(400): no product selected or command rejected.
            HTTPException(404): linked profile not found for this user.
        """
        workspace = self._get_or_create(session, user_id)
        product = self._require_product(workspace)
        customization = self._customization_of(workspace)

        if isinstance(command, LinkProfile):
            self._check_profile(session, user_id, command)

        try:
            updated = apply_command(customization, command, product.category)
        except EditorError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )

        if updated is customization:
            # No-op command (e.g. unknown template): nothing to persist.
            return self._to_read(workspace)

        self._write(session, workspace, updated)
        commit_or_503(session, "update the design")
        session.refresh(workspace)
        return self._to_read(workspace)

    def _check_profile(self, session: Session, user_id: uuid.UUID, command: LinkProfile) -> None:
        try:
            profile_id = uuid.UUID(command.profile_id)
        except ValueError:
            profile_id = None

        profile = self.profile_repo.get_by_id(session, profile_id) if profile_id else None
        if profile is None or profile.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found",
            )
        if profile.username != command.username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username does not match the selected profile",
            )

    def upload_asset(
        self,
        session: Session,
        user_id: uuid.UUID,
        slot: str,
        content_type: str,
        file_bytes: bytes,
    ) -> AssetUploadRead:
        """
        Upload a logo / artwork image and write its URL to the active side.

        - Validation happens before any storage call.
        - A failed upload leaves the design untouched (502).
        - If the product or active side changed while uploading, the
          result is discarded (409) so it cannot clobber newer edits.
        - The superseded asset is deleted best-effort afterwards.
        """
        field = ASSET_FIELDS.get(slot)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Unknown asset slot",
            )

        workspace = self._get_or_create(session, user_id)
        product = self._require_product(workspace)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        before = self._customization_of(workspace)
        target_side = before.active_side
        target_product = product.id

        path = f"designs/{user_id}/{slot}/{generate_filename(ext)}"
        try:
            url = upload_to_storage(path, file_bytes, content_type)
        except Exception:
            logger.exception("Upload of %s for user %s failed", slot, user_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to upload image. Please try again.",
            )

        # Re-read: the design may have moved on while the upload was in flight.
        session.expire_all()
        workspace = self._get_or_create(session, user_id)
        current = self._customization_of(workspace)
        if workspace.product_id != target_product or current.active_side != target_side:
            logger.info("Discarding stale %s upload for user %s", slot, user_id)
            delete_public_url(url)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="The design changed while the image was uploading. Please upload again.",
            )

        previous_url = getattr(current.side(target_side), field)
        updated = update_active_side_field(current, field, url)
        self._write(session, workspace, updated)
        commit_or_503(session, "save the uploaded image")
        session.refresh(workspace)

        if previous_url and previous_url != url:
            delete_public_url(previous_url)

        read = self._to_read(workspace)
        return AssetUploadRead(
            product=read.product,
            customization=read.customization,
            preview=read.preview,
            updated_at=read.updated_at,
            url=url,
            side=target_side,
        )
