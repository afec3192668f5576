"""Pydantic v2 models for the editor's presentation snapshot.

This module defines the slide model consumed by every exporter. Element
positions are pixels on the canonical 800x450 editor canvas, regardless of
the size the editor happened to render at. Field names are snake_case in
Python and camelCase on the wire, so editor JSON validates directly.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Canonical editor canvas (16:9)
CANVAS_WIDTH_PX = 800
CANVAS_HEIGHT_PX = 450


class ContentType:
    """Element type tags understood by the exporters."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    SHAPE = "shape"


class _EditorModel(BaseModel):
    """Base for all snapshot models: frozen, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Element Models
# ============================================================================


class ElementPosition(_EditorModel):
    """Absolute rectangle in canonical canvas pixels."""

    x: float = Field(description="Left edge in canvas pixels")
    y: float = Field(description="Top edge in canvas pixels")
    width: float = Field(ge=0, description="Width in canvas pixels")
    height: float = Field(ge=0, description="Height in canvas pixels")

    @property
    def right(self) -> float:
        """Right edge position."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge position."""
        return self.y + self.height


class ElementStyle(_EditorModel):
    """Per-element styling as stored by the editor.

    Every field is optional; absence means "use the target's default".
    """

    font_size: Optional[str] = Field(default=None, description="CSS length, e.g. '24px'")
    font_family: Optional[str] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    text_align: Optional[str] = None
    font_weight: Optional[str] = Field(default=None, description="normal | bold")
    font_style: Optional[str] = Field(default=None, description="normal | italic")
    position: Optional[ElementPosition] = None


class SlideContent(_EditorModel):
    """A single slide element.

    ``type`` is kept as a free string so decks containing element kinds this
    exporter does not know still validate; they are skipped at render time.
    """

    id: str
    type: str = Field(description="text | image | video | shape")
    content: str = ""
    style: ElementStyle = Field(default_factory=ElementStyle)


# ============================================================================
# Slide Models
# ============================================================================


class SlideBackground(_EditorModel):
    """Slide-level background override."""

    color: Optional[str] = None
    image: Optional[str] = None
    gradient: Optional[str] = None


class Slide(_EditorModel):
    """One slide. Element z-order is list order."""

    id: str
    title: str = ""
    layout: Literal["title", "content", "two-column", "image-text", "blank"] = "blank"
    content: list[SlideContent] = Field(default_factory=list)
    notes: str = ""
    transition: Optional[str] = None
    background: Optional[SlideBackground] = None


class PresentationSettings(_EditorModel):
    """Deck-wide settings.

    Most flags are only meaningful to the web slideshow exporter, which copies
    them verbatim into its script-library configuration.
    """

    title: str = ""
    author: str = ""
    theme: str = "white"
    transition: str = "slide"
    controls: bool = True
    progress: bool = True
    center: bool = True
    touch: bool = True
    loop: bool = False
    rtl: bool = False
    shuffle: bool = False
    fragments: bool = True
    embedded: bool = False
    help: bool = True
    show_notes: bool = False
    auto_slide: int = 0
    auto_slide_stoppable: bool = True
    mouse_wheel: bool = False
    hide_address_bar: bool = True
    preview_links: bool = False
    focus_body_on_load: bool = True
    hash: bool = False
    respond_to_hash_changes: bool = True
    jump_to_slide: bool = True
    history: bool = False


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Presentation(_EditorModel):
    """Top-level deck snapshot handed to the exporters."""

    id: str
    settings: PresentationSettings = Field(default_factory=PresentationSettings)
    slides: list[Slide] = Field(default_factory=list)
    created_at: str = Field(default_factory=_utc_now)
    updated_at: str = Field(default_factory=_utc_now)

    def snapshot(self) -> "Presentation":
        """Return a deep structural copy, detached from the live editor state."""
        return self.model_copy(deep=True)

    @classmethod
    def with_slides(
        cls,
        slides: list[Slide],
        settings: PresentationSettings,
        presentation_id: str = "temp-export",
    ) -> "Presentation":
        """Build a synthetic presentation holding only ``slides``.

        Used by the current-slide and selected-slides exports, which then run
        through the regular writers.
        """
        now = _utc_now()
        return cls(
            id=presentation_id,
            settings=settings,
            slides=list(slides),
            created_at=now,
            updated_at=now,
        )
