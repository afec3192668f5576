"""Base class for per-target slide renderers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from deckexport.dsl.schema import (
    ContentType,
    ElementPosition,
    PresentationSettings,
    Slide,
    SlideContent,
)
from deckexport.engine.resources import ResourceResolver
from deckexport.engine.style_mapper import BackgroundSpec
from deckexport.engine.units import TargetSpec
from deckexport.errors import ExportReport

IMAGE_PLACEHOLDER_TEXT = "[Image placeholder]"


@dataclass
class RenderContext:
    """Per-slide state handed to every element render call."""

    settings: PresentationSettings
    slide_index: int
    report: ExportReport = field(default_factory=ExportReport)

    @property
    def theme(self) -> str:
        return self.settings.theme

    def warn(self, message: str, element_id: Optional[str] = None) -> None:
        self.report.warn(message, slide_index=self.slide_index, element_id=element_id)


ElementHandler = Callable[[Any, SlideContent, ElementPosition, RenderContext], None]


class SlideRenderer(ABC):
    """Turns slide elements into one target's native representation.

    Subclasses own a *slide unit* (a python-pptx slide, an HTML section, a
    raster surface) created by :meth:`begin_slide`; the element handlers
    append to it in call order, which is the slide's z-order.
    """

    target: TargetSpec
    # Rectangle used for elements without an explicit position (canvas px)
    default_rect: ElementPosition = ElementPosition(x=0, y=0, width=200, height=50)
    # Whether speaker notes can travel with the output
    has_notes_channel: bool = False

    def __init__(self, resolver: Optional[ResourceResolver] = None):
        self.resolver = resolver or ResourceResolver()

    def element_handlers(self) -> dict[str, ElementHandler]:
        """Map of element type tag -> handler. Types not listed are unsupported."""
        return {
            ContentType.TEXT: self.render_text,
            ContentType.IMAGE: self.render_image,
            ContentType.SHAPE: self.render_shape,
        }

    def position_for(self, element: SlideContent) -> ElementPosition:
        return element.style.position or self.default_rect

    @abstractmethod
    def begin_slide(self, slide: Slide, context: RenderContext, background: BackgroundSpec) -> Any:
        """Create the slide unit and paint its background."""

    @abstractmethod
    def render_text(self, unit: Any, element: SlideContent, position: ElementPosition, context: RenderContext) -> None:
        """Add a positioned text block."""

    @abstractmethod
    def render_image(self, unit: Any, element: SlideContent, position: ElementPosition, context: RenderContext) -> None:
        """Add an image, or a placeholder text block if it cannot be resolved."""

    @abstractmethod
    def render_shape(self, unit: Any, element: SlideContent, position: ElementPosition, context: RenderContext) -> None:
        """Add a filled, outlined rectangle."""

    def attach_notes(self, unit: Any, notes: str) -> None:
        """Attach speaker notes. Targets without a notes channel ignore them."""

    def finish_slide(self, unit: Any) -> Any:
        """Hook for targets that post-process a finished unit."""
        return unit
