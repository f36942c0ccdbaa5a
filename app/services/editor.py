# app/services/editor.py
"""
Customization editor: a pure reducer over DesignCustomization.

Every mutation goes through apply_command() (or one of the helpers it
dispatches to) and returns a fresh aggregate. Field writes always go
through the `active_side` indirection so the editor mutates the side the
user is looking at.
"""

from pydantic import ValidationError

from app.core.catalog import get_template
from app.schemas.customization import (
    DesignCustomization,
    EditorCommand,
    FlipSide,
    LinkProfile,
    SelectTemplate,
    SetCanvaDesign,
    SetField,
    SideCustomization,
    UnlinkProfile,
)
from app.schemas.product import Category, supports_two_sides


class EditorError(ValueError):
    """Rejected editor input; the customization is left unchanged."""


def _side_field_names() -> dict[str, str]:
    # Both the Python attribute and its camelCase alias are accepted.
    names: dict[str, str] = {}
    for attr, info in SideCustomization.model_fields.items():
        names[attr] = attr
        if info.alias:
            names[info.alias] = attr
    return names


SIDE_FIELDS: dict[str, str] = _side_field_names()


def update_active_side_field(
    customization: DesignCustomization,
    field: str,
    value,
) -> DesignCustomization:
    attr = SIDE_FIELDS.get(field)
    if attr is None:
        raise EditorError(f"Unknown customization field: {field}")

    current = customization.side(customization.active_side)
    data = current.model_dump()
    data[attr] = value
    try:
        updated = SideCustomization.model_validate(data)
    except ValidationError as exc:
        raise EditorError(f"Invalid value for {field}: {exc.errors()[0]['msg']}") from exc

    return customization.model_copy(update={customization.active_side: updated})


def select_template(customization: DesignCustomization, template_id: str) -> DesignCustomization:
    """
    Apply a template's colors to the active side only.

    Unknown template ids are ignored.
    """
    template = get_template(template_id)
    if template is None:
        return customization

    current = customization.side(customization.active_side)
    updated = current.model_copy(
        update={
            "background_color": template.colors.bg,
            "text_color": template.colors.text,
            "accent_color": template.colors.accent,
        }
    )
    return customization.model_copy(
        update={"template_id": template.id, customization.active_side: updated}
    )


def flip_active_side(customization: DesignCustomization, category: Category) -> DesignCustomization:
    if not supports_two_sides(category):
        raise EditorError(f"{Category(category).value} products only have a front side")

    other = "back" if customization.active_side == "front" else "front"
    return customization.model_copy(update={"active_side": other})


def link_profile(
    customization: DesignCustomization,
    profile_id: str,
    username: str,
) -> DesignCustomization:
    profile_id = (profile_id or "").strip()
    username = (username or "").strip()
    if not profile_id or not username:
        raise EditorError("Both profile id and username are required to link a profile")

    return customization.model_copy(
        update={"linked_profile_id": profile_id, "linked_profile_username": username}
    )


def unlink_profile(customization: DesignCustomization) -> DesignCustomization:
    return customization.model_copy(
        update={"linked_profile_id": None, "linked_profile_username": None}
    )


def set_canva_design(customization: DesignCustomization, url: str | None) -> DesignCustomization:
    return customization.model_copy(update={"canva_design_url": url})


def apply_command(
    customization: DesignCustomization,
    command: EditorCommand,
    category: Category,
) -> DesignCustomization:
    """
    Single entry point for every editor mutation.

    Raises:
        EditorError: the command is invalid for this customization/product.
    """
    if isinstance(command, SetField):
        return update_active_side_field(customization, command.field, command.value)
    if isinstance(command, SelectTemplate):
        return select_template(customization, command.template_id)
    if isinstance(command, FlipSide):
        return flip_active_side(customization, category)
    if isinstance(command, LinkProfile):
        return link_profile(customization, command.profile_id, command.username)
    if isinstance(command, UnlinkProfile):
        return unlink_profile(customization)
    if isinstance(command, SetCanvaDesign):
        return set_canva_design(customization, command.url)
    raise EditorError(f"Unsupported command: {type(command).__name__}")
