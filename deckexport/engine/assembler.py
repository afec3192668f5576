"""Compose one slide's background, elements and notes for a target."""

import logging
from typing import Any, Optional

from deckexport.dsl.schema import PresentationSettings, Slide
from deckexport.engine.style_mapper import (
    BackgroundSpec,
    map_color,
    map_theme,
    parse_gradient,
    solid_background,
)
from deckexport.errors import ExportReport
from deckexport.renderer.base import RenderContext, SlideRenderer

logger = logging.getLogger(__name__)


def resolve_background(slide: Slide, settings: PresentationSettings) -> BackgroundSpec:
    """Pick the slide background.

    Priority: slide flat color > slide gradient > slide image > theme.
    An image background keeps the theme color as its flat fallback.
    """
    theme_background = map_theme(settings.theme)
    background = slide.background
    if background is None:
        return theme_background

    if background.color:
        return solid_background(map_color(background.color, theme_background.color))
    if background.gradient:
        return parse_gradient(background.gradient)
    if background.image:
        return BackgroundSpec(
            kind="image",
            color=theme_background.color,
            image=background.image,
        )
    return theme_background


class SlideAssembler:
    """Runs a slide through a target's renderer.

    Elements are rendered strictly in list order (later elements on top).
    Unsupported element types are skipped and recorded on the report.
    """

    def __init__(self, report: Optional[ExportReport] = None):
        self.report = report or ExportReport()

    def assemble(
        self,
        slide: Slide,
        settings: PresentationSettings,
        renderer: SlideRenderer,
        slide_index: int = 0,
    ) -> Any:
        """Build one native slide unit.

        Args:
            slide: The slide to render.
            settings: Deck settings (theme drives background and text defaults).
            renderer: The target's slide renderer.
            slide_index: Zero-based position of the slide in the deck.

        Returns:
            The renderer's finished slide unit.
        """
        context = RenderContext(settings=settings, slide_index=slide_index, report=self.report)
        background = resolve_background(slide, settings)
        unit = renderer.begin_slide(slide, context, background)

        handlers = renderer.element_handlers()
        for element in slide.content:
            handler = handlers.get(element.type)
            if handler is None:
                logger.warning(
                    f"Slide {slide_index + 1}: unsupported element type "
                    f"'{element.type}' ({element.id}) skipped for {renderer.target.name}"
                )
                context.warn(f"unsupported element type '{element.type}' skipped", element.id)
                continue
            handler(unit, element, renderer.position_for(element), context)

        if slide.notes and slide.notes.strip() and renderer.has_notes_channel:
            renderer.attach_notes(unit, slide.notes)

        return renderer.finish_slide(unit)
