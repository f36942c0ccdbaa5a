# app/services/migration.py
"""
Decoding of persisted customization JSON.

Stored records come in two shapes:
  - current: two-sided, has a `front` key
  - legacy:  flat single-sided fields (backgroundColor, name, ...)

decode_customization() tries the current schema, then the legacy one,
and finally falls back to defaults. It never raises.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from app.schemas.customization import (
    DEFAULT_ACCENT_COLOR,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_TEXT_COLOR,
    MAX_TEXT_LENGTH,
    DesignCustomization,
    LegacyCustomization,
    SideCustomization,
    default_back,
    default_customization,
)

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class CustomizationDecodeError(ValueError):
    pass


def _color(value: Any, default: str, field: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        logger.warning("Legacy customization has invalid %s %r; using %s", field, value, default)
        return default
    return value


def _text(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        logger.warning("Legacy customization has non-text %s %r; using empty text", field, value)
        return ""
    if len(value) > MAX_TEXT_LENGTH:
        logger.warning("Legacy customization %s is %d characters; truncating", field, len(value))
        return value[:MAX_TEXT_LENGTH]
    return value


def _optional_str(value: Any, field: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    logger.warning("Legacy customization has non-text %s %r; dropping it", field, value)
    return None


def _coerce_raw(raw: Any) -> dict:
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise CustomizationDecodeError("customization is not valid JSON") from exc
    if not isinstance(raw, dict):
        raise CustomizationDecodeError(
            f"customization must be a JSON object, got {type(raw).__name__}"
        )
    return raw


def migrate_legacy(legacy: LegacyCustomization) -> DesignCustomization:
    """
    Lift a flat legacy record into the two-sided shape.

    Total: every field is decoded on its own, and missing or malformed
    values fall back to the system defaults. The back side is the default
    back and the front is active.
    """
    front = SideCustomization(
        background_color=_color(legacy.background_color, DEFAULT_BACKGROUND_COLOR, "backgroundColor"),
        text_color=_color(legacy.text_color, DEFAULT_TEXT_COLOR, "textColor"),
        accent_color=_color(legacy.accent_color, DEFAULT_ACCENT_COLOR, "accentColor"),
        name=_text(legacy.name, "name"),
        title=_text(legacy.title, "title"),
        logo_url=_optional_str(legacy.logo_url, "logoUrl"),
        custom_artwork_url=_optional_str(legacy.custom_artwork_url, "customArtworkUrl"),
        pattern="none",
        border_style="none",
        icon=None,
        show_qr_code=False,
    )

    linked_id = _optional_str(legacy.linked_profile_id, "linkedProfileId")
    linked_username = _optional_str(legacy.linked_profile_username, "linkedProfileUsername")
    if (linked_id is None) != (linked_username is None):
        logger.warning("Legacy customization has a half-set linked profile; dropping it")
        linked_id = linked_username = None

    return DesignCustomization(
        front=front,
        back=default_back(),
        active_side="front",
        canva_design_url=_optional_str(legacy.canva_design_url, "canvaDesignUrl"),
        template_id=_optional_str(legacy.template_id, "templateId"),
        linked_profile_id=linked_id,
        linked_profile_username=linked_username,
    )


def migrate(raw: Any) -> DesignCustomization:
    """
    Strict decode of a stored customization.

    Raises:
        CustomizationDecodeError: neither the current nor the legacy
        schema matches.
    """
    data = _coerce_raw(raw)

    if "front" in data:
        try:
            return DesignCustomization.model_validate(data)
        except ValidationError as exc:
            raise CustomizationDecodeError(f"invalid current-format customization: {exc}") from exc

    try:
        return migrate_legacy(LegacyCustomization.model_validate(data))
    except ValidationError as exc:
        raise CustomizationDecodeError(f"invalid legacy customization: {exc}") from exc


def decode_customization(raw: Any, context: str = "") -> DesignCustomization:
    """
    Never-failing decode used on every load path.

    Unrecoverable records are replaced by defaults and logged.
    """
    try:
        return migrate(raw)
    except CustomizationDecodeError as exc:
        logger.warning("Falling back to default customization%s: %s", f" ({context})" if context else "", exc)
        return default_customization()


def is_legacy(raw: Any) -> bool:
    """True unless the record decodes to a current-format (two-sided) object."""
    try:
        data = _coerce_raw(raw)
    except CustomizationDecodeError:
        return True
    return "front" not in data


def swatch_color(raw: Any) -> str:
    """Front background color for list thumbnails, tolerant of any shape."""
    try:
        data = _coerce_raw(raw)
    except CustomizationDecodeError:
        return DEFAULT_BACKGROUND_COLOR
    front = data.get("front")
    if isinstance(front, dict) and isinstance(front.get("backgroundColor"), str):
        return front["backgroundColor"]
    if isinstance(data.get("backgroundColor"), str):
        return data["backgroundColor"]
    return DEFAULT_BACKGROUND_COLOR
