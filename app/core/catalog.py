# app/core/catalog.py
"""
Static storefront catalog: NFC products and design templates.

The catalog is owned by the storefront, not the database; drafts and
orders reference products by their string id.
"""

from app.schemas.product import Category, DesignTemplate, Product, TemplateColors

NFC_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="nfc-business-card",
        name="NFC Business Card",
        description="Premium PVC card with embedded NFC chip. Share your profile with a tap.",
        base_price=24.99,
        image="from-violet-500 to-purple-600",
        category=Category.CARD,
    ),
    Product(
        id="nfc-sticker",
        name="NFC Sticker",
        description="Waterproof sticker with NFC chip. Perfect for phones, laptops, or anywhere.",
        base_price=9.99,
        image="from-cyan-500 to-blue-600",
        category=Category.STICKER,
    ),
    Product(
        id="nfc-hand-band",
        name="NFC Hand Band",
        description="Stylish silicone wristband with embedded NFC. Great for events and networking.",
        base_price=19.99,
        image="from-green-500 to-emerald-600",
        category=Category.BAND,
    ),
    Product(
        id="nfc-keychain",
        name="NFC Key Chain",
        description="Durable keychain with NFC chip. Always have your profile on hand.",
        base_price=14.99,
        image="from-orange-500 to-amber-600",
        category=Category.KEYCHAIN,
    ),
    Product(
        id="nfc-review-card",
        name="NFC Review Card",
        description="Get more reviews! Customers tap to leave a Google or Yelp review instantly.",
        base_price=29.99,
        image="from-pink-500 to-rose-600",
        category=Category.REVIEW,
    ),
)

DESIGN_TEMPLATES: tuple[DesignTemplate, ...] = (
    DesignTemplate(id="minimal", name="Minimal", colors=TemplateColors(bg="#ffffff", text="#000000", accent="#6366f1")),
    DesignTemplate(id="dark", name="Dark Mode", colors=TemplateColors(bg="#1a1a2e", text="#ffffff", accent="#8b5cf6")),
    DesignTemplate(id="gradient", name="Gradient", colors=TemplateColors(bg="#667eea", text="#ffffff", accent="#f093fb")),
    DesignTemplate(id="nature", name="Nature", colors=TemplateColors(bg="#134e5e", text="#ffffff", accent="#71b280")),
    DesignTemplate(id="sunset", name="Sunset", colors=TemplateColors(bg="#ff6b6b", text="#ffffff", accent="#feca57")),
    DesignTemplate(id="ocean", name="Ocean", colors=TemplateColors(bg="#0077b6", text="#ffffff", accent="#00b4d8")),
)

_PRODUCTS_BY_ID: dict[str, Product] = {p.id: p for p in NFC_PRODUCTS}
_TEMPLATES_BY_ID: dict[str, DesignTemplate] = {t.id: t for t in DESIGN_TEMPLATES}


def get_product(product_id: str) -> Product | None:
    return _PRODUCTS_BY_ID.get(product_id)


def get_template(template_id: str) -> DesignTemplate | None:
    return _TEMPLATES_BY_ID.get(template_id)
