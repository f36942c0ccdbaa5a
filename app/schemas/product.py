# app/schemas/product.py
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Physical NFC product families; each has its own preview shape."""

    CARD = "card"
    STICKER = "sticker"
    BAND = "band"
    KEYCHAIN = "keychain"
    REVIEW = "review"


# Categories whose physical product has a printable back side
TWO_SIDED_CATEGORIES: frozenset[Category] = frozenset({Category.CARD, Category.KEYCHAIN})


def supports_two_sides(category: Category) -> bool:
    return Category(category) in TWO_SIDED_CATEGORIES


class Product(BaseModel):
    """
    Read-only catalog entry.

    `image` is a style reference (gradient classes) used by the client
    for product tiles, not an uploaded asset.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str
    description: str
    base_price: float = Field(gt=0)
    image: str
    category: Category

    @property
    def two_sided(self) -> bool:
        return supports_two_sides(self.category)


class TemplateColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    bg: str
    text: str
    accent: str


class DesignTemplate(BaseModel):
    """Named color preset applied to the active side."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    colors: TemplateColors


class ProductRead(Product):
    """Product plus derived flags for clients."""

    supports_back: bool
