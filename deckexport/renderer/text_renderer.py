"""Render text elements to PowerPoint text boxes."""

from typing import Any, Optional

from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.slide import Slide
from pptx.util import Emu, Pt

from deckexport.dsl.schema import SlideContent
from deckexport.engine.style_mapper import (
    default_text_color,
    is_transparent,
    map_alignment,
    map_color,
    map_font,
)
from deckexport.engine.units import (
    OFFICE_SLIDE,
    TargetRect,
    font_size_to_points,
    inches_to_emu,
    parse_css_length,
)
from deckexport.renderer.style_renderer import StyleRenderer


# Run sizes PowerPoint accepts, in points
MIN_FONT_PT = 1
MAX_FONT_PT = 4000

# Map normalized alignment to PowerPoint
ALIGN_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
}


def normalize_line_breaks(text: str) -> str:
    """Collapse CRLF and lone CR into LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def explicit_flag(value: Optional[str], on: str) -> Optional[bool]:
    """Tri-state font flag: True/False when set, None to inherit."""
    if value is None:
        return None
    return value.strip().lower() == on


class TextRenderer:
    """Renders text elements as positioned PowerPoint text boxes."""

    def __init__(self, style_renderer: Optional[StyleRenderer] = None) -> None:
        self.style_renderer = style_renderer or StyleRenderer()

    def render(
        self,
        slide: Slide,
        element: SlideContent,
        rect: TargetRect,
        theme: str,
        text: Optional[str] = None,
    ) -> Any:
        """Add a text box for ``element`` at ``rect`` (inches).

        Args:
            slide: The PowerPoint slide.
            element: The text element.
            rect: Target rectangle in inches.
            theme: Theme name, used for the default text color.
            text: Override for the element's content (placeholders).

        Returns:
            The new text box shape.
        """
        style = element.style
        text_box = slide.shapes.add_textbox(
            Emu(inches_to_emu(rect.x)),
            Emu(inches_to_emu(rect.y)),
            Emu(inches_to_emu(rect.width)),
            Emu(inches_to_emu(rect.height)),
        )
        text_box.name = element.id

        if style.background_color and not is_transparent(style.background_color):
            self.style_renderer.apply_solid_fill(
                text_box, map_color(style.background_color, "FFFFFF")
            )

        text_frame = text_box.text_frame
        text_frame.word_wrap = True
        text_frame.auto_size = MSO_AUTO_SIZE.NONE
        text_frame.vertical_anchor = MSO_ANCHOR.TOP
        text_frame.margin_left = Emu(0)
        text_frame.margin_right = Emu(0)
        text_frame.margin_top = Emu(0)
        text_frame.margin_bottom = Emu(0)

        content = normalize_line_breaks(element.content if text is None else text)
        alignment = ALIGN_MAP[map_alignment(style.text_align)]

        for i, line in enumerate(content.split("\n")):
            paragraph = text_frame.paragraphs[0] if i == 0 else text_frame.add_paragraph()
            paragraph.alignment = alignment
            paragraph.space_before = Pt(0)
            paragraph.space_after = Pt(0)
            run = paragraph.add_run()
            run.text = line
            self._apply_run_formatting(run, element, theme)

        return text_box

    def _apply_run_formatting(self, run: Any, element: SlideContent, theme: str) -> None:
        """Apply font, size, color and explicit weight/style flags to a run.

        Args:
            run: The python-pptx Run object.
            element: The source element.
            theme: Theme name for the default color.
        """
        style = element.style
        font = run.font

        font.name = map_font(style.font_family)
        points = font_size_to_points(parse_css_length(style.font_size), OFFICE_SLIDE)
        font.size = Pt(min(max(points, MIN_FONT_PT), MAX_FONT_PT))
        font.color.rgb = self.style_renderer.parse_color(
            map_color(style.color, default_text_color(theme))
        )

        # Leave unset flags as None so the run inherits
        bold = explicit_flag(style.font_weight, "bold")
        if bold is not None:
            font.bold = bold
        italic = explicit_flag(style.font_style, "italic")
        if italic is not None:
            font.italic = italic
