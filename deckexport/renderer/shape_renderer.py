"""Render slide elements to PowerPoint shapes."""

import logging
from typing import Any, Optional

from pptx.enum.shapes import MSO_SHAPE
from pptx.presentation import Presentation as PptxPresentation
from pptx.slide import Slide as PptxSlide
from pptx.util import Emu

from deckexport.dsl.schema import ElementPosition, Slide, SlideContent
from deckexport.engine.resources import ResourceResolver
from deckexport.engine.style_mapper import (
    BLACK,
    SHAPE_FILL_DEFAULT,
    BackgroundSpec,
    is_transparent,
    map_color,
    solid_background,
)
from deckexport.engine.units import (
    OFFICE_SLIDE,
    TargetRect,
    fit_contain,
    inches_to_emu,
    to_target_rect,
)
from deckexport.errors import ResourceError
from deckexport.renderer.base import IMAGE_PLACEHOLDER_TEXT, RenderContext, SlideRenderer
from deckexport.renderer.style_renderer import StyleRenderer
from deckexport.renderer.text_renderer import TextRenderer

logger = logging.getLogger(__name__)

# Blank layout in the default template
BLANK_LAYOUT_INDEX = 6

# The placeholder is always drawn as on a light slide
PLACEHOLDER_THEME = "white"


def _emu(inches: float) -> Emu:
    return Emu(inches_to_emu(inches))


class ShapeRenderer(SlideRenderer):
    """Renders slide elements into a python-pptx presentation."""

    target = OFFICE_SLIDE
    default_rect = ElementPosition(x=50, y=50, width=200, height=50)
    has_notes_channel = True

    def __init__(self, prs: PptxPresentation, resolver: Optional[ResourceResolver] = None) -> None:
        """Initialize the shape renderer.

        Args:
            prs: Presentation the slides are added to.
            resolver: Image resolver shared across the export.
        """
        super().__init__(resolver)
        self.prs = prs
        self.style_renderer = StyleRenderer()
        self.text_renderer = TextRenderer(self.style_renderer)

    def begin_slide(self, slide: Slide, context: RenderContext, background: BackgroundSpec) -> PptxSlide:
        pptx_slide = self.prs.slides.add_slide(self.prs.slide_layouts[BLANK_LAYOUT_INDEX])

        if background.kind == "image":
            if self._render_background_image(pptx_slide, background, context):
                return pptx_slide
            background = solid_background(background.color)

        self.style_renderer.apply_background(
            pptx_slide,
            background,
            self.prs.slide_width,
            self.prs.slide_height,
        )
        return pptx_slide

    def _render_background_image(
        self,
        pptx_slide: PptxSlide,
        background: BackgroundSpec,
        context: RenderContext,
    ) -> bool:
        try:
            resource = self.resolver.resolve_image(background.image or "")
        except ResourceError as e:
            logger.warning(f"Slide {context.slide_index + 1}: background image unavailable ({e})")
            context.warn(f"background image unavailable: {e}")
            return False

        picture = pptx_slide.shapes.add_picture(
            resource.stream(),
            Emu(0),
            Emu(0),
            self.prs.slide_width,
            self.prs.slide_height,
        )
        picture.name = "Background"
        return True

    def render_text(
        self,
        unit: PptxSlide,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        self.text_renderer.render(unit, element, to_target_rect(position, self.target), context.theme)

    def render_image(
        self,
        unit: PptxSlide,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        """Embed a picture contain-fitted to its box.

        If the image can't be resolved, a text placeholder takes its place.
        """
        rect = to_target_rect(position, self.target)
        try:
            resource = self.resolver.resolve_image(element.content)
        except ResourceError as e:
            logger.warning(f"Slide {context.slide_index + 1}: image {element.id} replaced by placeholder ({e})")
            context.warn(f"image replaced by placeholder: {e}", element.id)
            self.render_placeholder(unit, element, rect)
            return

        fitted = fit_contain(resource.width, resource.height, rect)
        picture = unit.shapes.add_picture(
            resource.stream(),
            _emu(fitted.x),
            _emu(fitted.y),
            _emu(fitted.width),
            _emu(fitted.height),
        )
        picture.name = element.id

    def render_placeholder(self, unit: PptxSlide, element: SlideContent, rect: TargetRect) -> Any:
        return self.text_renderer.render(
            unit,
            element,
            rect,
            PLACEHOLDER_THEME,
            text=IMAGE_PLACEHOLDER_TEXT,
        )

    def render_shape(
        self,
        unit: PptxSlide,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        """Add a rectangle: fill from background color, outline from text color."""
        rect = to_target_rect(position, self.target)
        pptx_shape = unit.shapes.add_shape(
            MSO_SHAPE.RECTANGLE,
            _emu(rect.x),
            _emu(rect.y),
            _emu(rect.width),
            _emu(rect.height),
        )
        pptx_shape.name = element.id

        style = element.style
        if is_transparent(style.background_color):
            self.style_renderer.apply_no_fill(pptx_shape)
        else:
            self.style_renderer.apply_solid_fill(
                pptx_shape, map_color(style.background_color, SHAPE_FILL_DEFAULT)
            )
        self.style_renderer.apply_outline(pptx_shape, map_color(style.color, BLACK))

    def attach_notes(self, unit: PptxSlide, notes: str) -> None:
        unit.notes_slide.notes_text_frame.text = notes
