"""Apply fills, outlines and backgrounds to PowerPoint shapes."""

from typing import Any

from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.slide import Slide
from pptx.util import Emu, Pt

from deckexport.engine.style_mapper import BackgroundSpec, map_color
from deckexport.engine.units import css_angle_to_drawingml

# Outline width for shape elements
SHAPE_OUTLINE_PT = 1.0

BACKGROUND_SHAPE_NAME = "Background"


class StyleRenderer:
    """Applies visual styles to PowerPoint shapes and slides."""

    def apply_solid_fill(self, pptx_shape: Any, token: str) -> None:
        """Fill a shape with a flat color.

        Args:
            pptx_shape: The python-pptx shape object.
            token: Hex color token.
        """
        pptx_shape.fill.solid()
        pptx_shape.fill.fore_color.rgb = self.parse_color(token)

    def apply_no_fill(self, pptx_shape: Any) -> None:
        pptx_shape.fill.background()

    def apply_outline(self, pptx_shape: Any, token: str, width_pt: float = SHAPE_OUTLINE_PT) -> None:
        """Apply a solid outline.

        Args:
            pptx_shape: The python-pptx shape object.
            token: Hex color token.
            width_pt: Line width in points.
        """
        line = pptx_shape.line
        line.color.rgb = self.parse_color(token)
        line.width = Pt(width_pt)

    def remove_outline(self, pptx_shape: Any) -> None:
        pptx_shape.line.fill.background()

    def apply_gradient_fill(self, pptx_shape: Any, background: BackgroundSpec) -> None:
        """Apply a two-stop linear gradient.

        python-pptx expresses the angle counter-clockwise, DrawingML stores it
        clockwise; the CSS angle is converted to DrawingML first.

        Args:
            pptx_shape: The python-pptx shape object.
            background: Gradient background spec (CSS angle, two stops).
        """
        fill = pptx_shape.fill
        fill.gradient()
        clockwise = css_angle_to_drawingml(background.angle)
        fill.gradient_angle = (360.0 - clockwise) % 360.0

        gradient_stops = fill.gradient_stops
        stops = background.stops
        for i, gs in enumerate(gradient_stops):
            if i >= len(stops):
                break
            # python-pptx starts with exactly two stops; first and last are used
            stop = stops[0] if i == 0 else stops[-1]
            gs.color.rgb = self.parse_color(stop.color)
            gs.position = stop.position

    def apply_background(
        self,
        slide: Slide,
        background: BackgroundSpec,
        slide_width: Emu,
        slide_height: Emu,
    ) -> Any:
        """Apply a resolved background to a slide.

        The native slide background only takes flat fills here, so gradients
        are drawn as a full-bleed, borderless rectangle behind every element.

        Args:
            slide: The PowerPoint slide.
            background: The resolved background.
            slide_width: Slide width in EMUs.
            slide_height: Slide height in EMUs.

        Returns:
            The background shape for gradients, otherwise None.
        """
        if background.is_gradient:
            rect = slide.shapes.add_shape(
                MSO_SHAPE.RECTANGLE,
                Emu(0),
                Emu(0),
                slide_width,
                slide_height,
            )
            rect.name = BACKGROUND_SHAPE_NAME
            self.apply_gradient_fill(rect, background)
            self.remove_outline(rect)
            rect.shadow.inherit = False
            return rect

        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = self.parse_color(background.color)
        return None

    def parse_color(self, token: str) -> RGBColor:
        """Parse a hex token (or any CSS color) to RGBColor.

        Args:
            token: Color token, e.g. '1E293B' or '#1e293b'.

        Returns:
            RGBColor object.
        """
        return RGBColor.from_string(map_color(token, "000000"))
