import pytest

from app.schemas.customization import (
    CommandRequest,
    DesignCustomization,
    FlipSide,
    LinkProfile,
    SelectTemplate,
    SetCanvaDesign,
    SetField,
    UnlinkProfile,
    default_customization,
)
from app.schemas.product import Category
from app.services.editor import (
    EditorError,
    apply_command,
    flip_active_side,
    link_profile,
    select_template,
    unlink_profile,
    update_active_side_field,
)


def test_field_write_goes_to_active_side_only():
    c = default_customization()

    updated = update_active_side_field(c, "name", "Ada Lovelace")

    assert updated.front.name == "Ada Lovelace"
    assert updated.back == c.back
    # input is untouched
    assert c.front.name == ""


def test_field_write_after_flip_targets_back():
    c = flip_active_side(default_customization(), Category.CARD)

    updated = update_active_side_field(c, "backgroundColor", "#ff0000")

    assert updated.back.background_color == "#ff0000"
    assert updated.front.background_color == c.front.background_color


def test_camel_case_and_attribute_names_are_both_accepted():
    c = default_customization()

    a = update_active_side_field(c, "showQRCode", True)
    b = update_active_side_field(c, "show_qr_code", True)

    assert a == b
    assert a.front.show_qr_code is True


@pytest.mark.parametrize(
    "field, value",
    [
        ("backgroundColor", "red"),
        ("pattern", "zigzag"),
        ("borderStyle", "double"),
        ("icon", "rocket"),
        ("name", "x" * 101),
        ("unknownField", "x"),
    ],
)
def test_invalid_field_writes_are_rejected(field, value):
    with pytest.raises(EditorError):
        update_active_side_field(default_customization(), field, value)


def test_icon_can_be_cleared():
    c = update_active_side_field(default_customization(), "icon", "star")

    cleared = update_active_side_field(c, "icon", None)

    assert cleared.front.icon is None


def test_template_applies_colors_to_active_side():
    c = flip_active_side(default_customization(), Category.KEYCHAIN)

    updated = select_template(c, "sunset")

    assert updated.template_id == "sunset"
    assert updated.back.background_color == "#ff6b6b"
    assert updated.back.text_color == "#ffffff"
    assert updated.back.accent_color == "#feca57"
    assert updated.front == c.front


def test_unknown_template_is_a_no_op():
    c = default_customization()

    assert select_template(c, "does-not-exist") is c


def test_flip_toggles_for_two_sided_products():
    c = default_customization()

    once = flip_active_side(c, Category.CARD)
    twice = flip_active_side(once, Category.CARD)

    assert once.active_side == "back"
    assert twice.active_side == "front"


@pytest.mark.parametrize("category", [Category.STICKER, Category.BAND, Category.REVIEW])
def test_flip_rejected_for_single_sided_products(category):
    with pytest.raises(EditorError):
        flip_active_side(default_customization(), category)


def test_link_and_unlink_profile_keep_the_pair_consistent():
    linked = link_profile(default_customization(), "p-1", "ada")

    assert linked.linked_profile_id == "p-1"
    assert linked.linked_profile_username == "ada"

    unlinked = unlink_profile(linked)
    assert unlinked.linked_profile_id is None
    assert unlinked.linked_profile_username is None


def test_link_profile_requires_both_values():
    with pytest.raises(EditorError):
        link_profile(default_customization(), "p-1", "  ")


def test_half_linked_customization_cannot_be_built():
    with pytest.raises(ValueError):
        DesignCustomization(linked_profile_id="p-1")


def test_apply_command_dispatches_every_command():
    c = default_customization()

    c = apply_command(c, SetField(field="name", value="Ada"), Category.CARD)
    c = apply_command(c, SelectTemplate(template_id="ocean"), Category.CARD)
    c = apply_command(c, FlipSide(), Category.CARD)
    c = apply_command(c, LinkProfile(profile_id="p-1", username="ada"), Category.CARD)
    c = apply_command(c, SetCanvaDesign(url=" https://canva.com/d/1 "), Category.CARD)

    assert c.front.name == "Ada"
    assert c.front.background_color == "#0077b6"
    assert c.active_side == "back"
    assert c.linked_profile_username == "ada"
    assert c.canva_design_url == "https://canva.com/d/1"

    c = apply_command(c, UnlinkProfile(), Category.CARD)
    c = apply_command(c, SetCanvaDesign(url=""), Category.CARD)
    assert c.linked_profile_id is None
    assert c.canva_design_url is None


def test_command_request_parses_discriminated_union():
    req = CommandRequest.model_validate(
        {"command": {"type": "select_template", "templateId": "dark"}}
    )

    assert isinstance(req.command, SelectTemplate)
    assert req.command.template_id == "dark"
