# app/schemas/customization.py
from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Side = Literal["front", "back"]
Pattern = Literal["none", "dots", "lines", "grid", "waves", "geometric"]
BorderStyle = Literal["none", "solid", "dashed", "gradient", "glow"]
IconName = Literal[
    "wifi",
    "star",
    "heart",
    "bolt",
    "globe",
    "music",
    "camera",
    "coffee",
    "briefcase",
    "sparkles",
]

ICON_CATALOG: tuple[str, ...] = get_args(IconName)

HexColor = Annotated[
    str,
    Field(pattern=r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"),
]

DEFAULT_BACKGROUND_COLOR = "#1a1a2e"
DEFAULT_TEXT_COLOR = "#ffffff"
DEFAULT_ACCENT_COLOR = "#6366f1"

# Longest name / title printed on a side
MAX_TEXT_LENGTH = 100

# Shared config: camelCase on the wire, snake_case in Python, immutable.
_customization_config = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class SideCustomization(BaseModel):
    """
    Customization of one physical face of a product.

    Every field has a concrete default so a side is always fully
    populated; only the asset URLs and the icon may be null.
    """

    model_config = _customization_config

    background_color: HexColor = DEFAULT_BACKGROUND_COLOR
    text_color: HexColor = DEFAULT_TEXT_COLOR
    accent_color: HexColor = DEFAULT_ACCENT_COLOR
    name: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    title: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    logo_url: str | None = None
    custom_artwork_url: str | None = None
    pattern: Pattern = "none"
    border_style: BorderStyle = "none"
    icon: IconName | None = None
    show_qr_code: bool = Field(default=False, alias="showQRCode")


def default_front() -> SideCustomization:
    return SideCustomization()


def default_back() -> SideCustomization:
    # The back of a two-sided product carries the QR code by default.
    return SideCustomization(show_qr_code=True)


class DesignCustomization(BaseModel):
    """
    Two-sided customization aggregate plus cross-side metadata.

    Invariant: linked_profile_id and linked_profile_username are either
    both set or both null.
    """

    model_config = _customization_config

    front: SideCustomization = Field(default_factory=default_front)
    back: SideCustomization = Field(default_factory=default_back)
    active_side: Side = "front"
    canva_design_url: str | None = None
    template_id: str | None = None
    linked_profile_id: str | None = None
    linked_profile_username: str | None = None

    @model_validator(mode="after")
    def linked_profile_pair(self) -> "DesignCustomization":
        if (self.linked_profile_id is None) != (self.linked_profile_username is None):
            raise ValueError(
                "linkedProfileId and linkedProfileUsername must be set or cleared together"
            )
        return self

    def side(self, which: Side) -> SideCustomization:
        return self.front if which == "front" else self.back

    @property
    def active(self) -> SideCustomization:
        return self.side(self.active_side)

    def to_json(self) -> dict:
        """Serialized form stored in JSON columns (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


def default_customization() -> DesignCustomization:
    return DesignCustomization()


class LegacyCustomization(BaseModel):
    """
    Flat single-sided record written before two-sided designs existed.

    Values are kept untyped here; the migration decides per-field fallbacks,
    so one malformed field never rejects the whole record.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    background_color: Any = None
    text_color: Any = None
    accent_color: Any = None
    name: Any = None
    title: Any = None
    logo_url: Any = None
    custom_artwork_url: Any = None
    canva_design_url: Any = None
    template_id: Any = None
    linked_profile_id: Any = None
    linked_profile_username: Any = None


# ---------------------------------------------------------------------------
# Editor commands
# ---------------------------------------------------------------------------

_command_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class SetField(BaseModel):
    """Write one field of the active side."""

    model_config = _command_config

    type: Literal["set_field"] = "set_field"
    field: str
    value: str | bool | None = None


class SelectTemplate(BaseModel):
    model_config = _command_config

    type: Literal["select_template"] = "select_template"
    template_id: str


class FlipSide(BaseModel):
    model_config = _command_config

    type: Literal["flip_side"] = "flip_side"


class LinkProfile(BaseModel):
    model_config = _command_config

    type: Literal["link_profile"] = "link_profile"
    profile_id: str
    username: str

    @field_validator("profile_id", "username")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class UnlinkProfile(BaseModel):
    model_config = _command_config

    type: Literal["unlink_profile"] = "unlink_profile"


class SetCanvaDesign(BaseModel):
    """Attach (or clear, with null) an external Canva design link."""

    model_config = _command_config

    type: Literal["set_canva_design"] = "set_canva_design"
    url: str | None = None

    @field_validator("url")
    @classmethod
    def normalize_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


EditorCommand = Annotated[
    Union[SetField, SelectTemplate, FlipSide, LinkProfile, UnlinkProfile, SetCanvaDesign],
    Field(discriminator="type"),
]


class CommandRequest(BaseModel):
    """Body of POST /workspace/commands."""

    command: EditorCommand
