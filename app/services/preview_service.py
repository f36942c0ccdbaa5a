# app/services/preview_service.py
"""
Live preview renderer.

render() is a pure function of (product, customization, show_back): it
builds a VisualNode tree describing what the client should draw. Nothing
is cached between calls; the QR payload is derived from the linked
profile on every render.
"""

from app.core.config import get_settings
from app.schemas.customization import DesignCustomization, Side, SideCustomization
from app.schemas.preview import PreviewRead, VisualNode
from app.schemas.product import Category, Product, supports_two_sides

CARD_WIDTH = 340
CARD_HEIGHT = 200
STICKER_SIZE = 200
BAND_WIDTH = 300
BAND_HEIGHT = 60
KEYCHAIN_TAG_SCALE = 0.5

MUTED_ALPHA = "99"
PATTERN_OPACITY = 0.15
ARTWORK_OPACITY = 0.3

# Deterministic fill parameters per background pattern
PATTERN_SPECS: dict[str, dict] = {
    "dots": {"spacing": 12, "radius": 2},
    "lines": {"spacing": 10, "angle": 45, "stroke_width": 1},
    "grid": {"spacing": 16, "stroke_width": 1},
    "waves": {"wavelength": 24, "amplitude": 6, "stroke_width": 2},
    "geometric": {"spacing": 20, "shape": "triangle"},
}


def _node(kind: str, *children: VisualNode | None, **props) -> VisualNode:
    return VisualNode(kind=kind, props=props, children=[c for c in children if c is not None])


def with_alpha(color: str, alpha: str) -> str:
    """#rgb / #rrggbb / #rrggbbaa -> #rrggbb<alpha>."""
    digits = color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits[:6]}{alpha}"


def qr_payload(
    customization: DesignCustomization,
    profile_host: str | None = None,
    fallback_url: str | None = None,
) -> str:
    settings = get_settings()
    if customization.linked_profile_username:
        host = profile_host or settings.PUBLIC_PROFILE_HOST
        return f"https://{host}/@{customization.linked_profile_username}"
    return fallback_url or settings.QR_FALLBACK_URL


def shown_side(
    product: Product,
    customization: DesignCustomization,
    show_back: bool | None = None,
) -> Side:
    if not supports_two_sides(product.category):
        return "front"
    if show_back is None:
        return customization.active_side
    return "back" if show_back else "front"


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


def _pattern_fill(side: SideCustomization) -> VisualNode | None:
    if side.pattern == "none":
        return None
    return _node(
        "pattern",
        pattern=side.pattern,
        color=side.accent_color,
        opacity=PATTERN_OPACITY,
        **PATTERN_SPECS[side.pattern],
    )


def _border(side: SideCustomization, implicit_width: int | None = None, scale: float = 1.0) -> VisualNode | None:
    """
    Stroke/glow rule for the outline.

    Round products pass implicit_width so `none` still draws an accent ring.
    """
    style = side.border_style
    if style == "none":
        if implicit_width is None:
            return None
        return _node("border", style="solid", color=side.accent_color, width=implicit_width, implicit=True)
    if style == "solid":
        return _node("border", style="solid", color=side.accent_color, width=2 * scale)
    if style == "dashed":
        return _node("border", style="dashed", color=side.accent_color, width=2 * scale, dash=[6 * scale, 4 * scale])
    if style == "gradient":
        return _node(
            "border",
            style="gradient",
            width=3 * scale,
            gradient=[side.accent_color, side.text_color],
        )
    # glow
    return _node("border", style="glow", color=side.accent_color, blur=16 * scale, spread=2 * scale)


def _nfc_indicator(color: str, anchor: str, size: float) -> VisualNode:
    return _node("icon", name="wifi", color=color, anchor=anchor, size=size)


def _qr_badge(side: SideCustomization, payload: str, anchor: str, size: float) -> VisualNode | None:
    if not side.show_qr_code:
        return None
    return _node(
        "qr",
        payload=payload,
        anchor=anchor,
        size=size,
        foreground="#000000",
        background="#ffffff",
    )


def _artwork(side: SideCustomization) -> VisualNode | None:
    if not side.custom_artwork_url:
        return None
    return _node("image", src=side.custom_artwork_url, fit="cover", opacity=ARTWORK_OPACITY, anchor="fill")


def _text(value: str, color: str, size: float, weight: str = "normal", **props) -> VisualNode:
    return _node("text", value=value, color=color, size=size, weight=weight, **props)


# ---------------------------------------------------------------------------
# Category layouts
# ---------------------------------------------------------------------------


def _card_face(
    side: SideCustomization,
    customization: DesignCustomization,
    payload: str,
    scale: float = 1.0,
    name_placeholder: str = "Your Name",
    title_placeholder: str = "Your Title",
) -> VisualNode:
    width = CARD_WIDTH * scale
    height = CARD_HEIGHT * scale

    content = [
        _text(side.name or name_placeholder, side.text_color, 20 * scale, "bold"),
        _text(side.title or title_placeholder, with_alpha(side.text_color, MUTED_ALPHA), 14 * scale),
    ]
    if customization.linked_profile_username:
        content.append(
            _text(f"@{customization.linked_profile_username}", side.accent_color, 12 * scale, "medium")
        )
    if side.icon:
        content.insert(0, _node("icon", name=side.icon, color=side.accent_color, size=18 * scale))

    return _node(
        "rect",
        _artwork(side),
        _pattern_fill(side),
        _nfc_indicator(side.accent_color, "top-right", 24 * scale),
        _node("image", src=side.logo_url, anchor="top-left", size=48 * scale, radius=8 * scale)
        if side.logo_url
        else None,
        _qr_badge(side, payload, "bottom-right", 56 * scale),
        _node("group", *content, anchor="bottom-left", inset=24 * scale, layout="column"),
        _node("rect", anchor="bottom", width=width, height=4 * scale, fill=side.accent_color),
        _border(side, scale=scale),
        width=width,
        height=height,
        radius=16 * scale,
        fill=side.background_color,
    )


def _review_face(side: SideCustomization, customization: DesignCustomization, payload: str) -> VisualNode:
    stars = [_node("icon", name="star", color=side.accent_color, size=32, filled=True) for _ in range(5)]
    return _node(
        "rect",
        _artwork(side),
        _pattern_fill(side),
        _node(
            "group",
            _node("group", *stars, layout="row", gap=4),
            _text(side.name or "Leave a Review", side.text_color, 20, "bold"),
            _text(side.title or "Tap to rate us!", with_alpha(side.text_color, MUTED_ALPHA), 14),
            anchor="center",
            layout="column",
        ),
        _nfc_indicator(side.accent_color, "bottom-right", 24),
        _qr_badge(side, payload, "top-right", 56),
        _node("rect", anchor="bottom", width=CARD_WIDTH, height=4, fill=side.accent_color),
        _border(side),
        width=CARD_WIDTH,
        height=CARD_HEIGHT,
        radius=16,
        fill=side.background_color,
    )


def _sticker_face(side: SideCustomization, payload: str) -> VisualNode:
    if side.logo_url:
        center = _node("image", src=side.logo_url, anchor="center", size=96, shape="circle")
    else:
        center = _node(
            "group",
            _node("icon", name=side.icon or "wifi", color=side.accent_color, size=48),
            _text(side.name or "TAP ME", side.text_color, 14, "bold"),
            anchor="center",
            layout="column",
        )
    return _node(
        "circle",
        _artwork(side),
        _pattern_fill(side),
        center,
        _qr_badge(side, payload, "bottom", 40),
        _border(side, implicit_width=4),
        diameter=STICKER_SIZE,
        fill=side.background_color,
    )


def _band_face(side: SideCustomization, payload: str) -> VisualNode:
    return _node(
        "pill",
        _pattern_fill(side),
        _node(
            "group",
            _node("icon", name=side.icon or "wifi", color=side.accent_color, size=20),
            _text(side.name or "YOUR NAME", side.text_color, 18, "bold", max_lines=1),
            anchor="center",
            layout="row",
        ),
        _qr_badge(side, payload, "right", 40),
        _border(side, implicit_width=2),
        width=BAND_WIDTH,
        height=BAND_HEIGHT,
        fill=side.background_color,
    )


def _keychain(side: SideCustomization, customization: DesignCustomization, payload: str) -> VisualNode:
    tag = _card_face(
        side,
        customization,
        payload,
        scale=KEYCHAIN_TAG_SCALE,
        name_placeholder="NAME",
        title_placeholder="Title",
    )
    return _node(
        "group",
        _node("circle", diameter=32, stroke=side.accent_color, stroke_width=4, role="ring"),
        _node("rect", width=4, height=16, fill=side.accent_color, role="chain"),
        _node("group", tag, role="tag", scale=KEYCHAIN_TAG_SCALE),
        layout="column",
        align="center",
    )


def _render_shape(
    product: Product,
    side: SideCustomization,
    customization: DesignCustomization,
    payload: str,
) -> VisualNode:
    category = Category(product.category)
    if category is Category.CARD:
        return _card_face(side, customization, payload)
    if category is Category.REVIEW:
        return _review_face(side, customization, payload)
    if category is Category.STICKER:
        return _sticker_face(side, payload)
    if category is Category.BAND:
        return _band_face(side, payload)
    if category is Category.KEYCHAIN:
        return _keychain(side, customization, payload)
    raise ValueError(f"No preview layout for category {category!r}")


def render(
    product: Product,
    customization: DesignCustomization,
    show_back: bool | None = None,
) -> VisualNode:
    """
    Build the preview tree for a product.

    The side shown is `show_back` when given, otherwise the active side;
    single-sided categories always show the front. A back side is marked
    with a 180 degree turn, which the client animates.
    """
    which = shown_side(product, customization, show_back)
    payload = qr_payload(customization)

    return _node(
        "preview",
        _render_shape(product, customization.side(which), customization, payload),
        _text("Canva design will be applied to final product", "#6b7280", 12, role="note")
        if customization.canva_design_url
        else None,
        product_id=product.id,
        category=Category(product.category).value,
        side=which,
        rotate_y=180 if which == "back" else 0,
        two_sided=supports_two_sides(product.category),
    )


def build_preview(
    product: Product,
    customization: DesignCustomization,
    show_back: bool | None = None,
) -> PreviewRead:
    return PreviewRead(
        product_id=product.id,
        side=shown_side(product, customization, show_back),
        qr_payload=qr_payload(customization),
        tree=render(product, customization, show_back),
    )
