"""Slide model consumed by the exporters."""

from deckexport.dsl.schema import (
    CANVAS_HEIGHT_PX,
    CANVAS_WIDTH_PX,
    ContentType,
    ElementPosition,
    ElementStyle,
    Presentation,
    PresentationSettings,
    Slide,
    SlideBackground,
    SlideContent,
)

__all__ = [
    "CANVAS_HEIGHT_PX",
    "CANVAS_WIDTH_PX",
    "ContentType",
    "ElementPosition",
    "ElementStyle",
    "Presentation",
    "PresentationSettings",
    "Slide",
    "SlideBackground",
    "SlideContent",
]
