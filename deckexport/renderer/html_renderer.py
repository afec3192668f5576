"""
html_renderer.py — Slide elements to positioned HTML fragments.

The web slideshow renders in a real browser viewport sized to the canonical
canvas, so fragments carry literal pixel offsets. The renderer never emits
markup itself; it produces fragment records that the document template
turns into escaped HTML.
"""

import base64
import logging
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from deckexport.dsl.schema import ContentType, ElementPosition, Slide, SlideContent
from deckexport.engine.resources import ResourceResolver
from deckexport.engine.style_mapper import (
    BLACK,
    SHAPE_FILL_DEFAULT,
    BackgroundSpec,
    default_text_color,
    is_transparent,
    map_alignment,
    map_color,
    token_to_css,
)
from deckexport.engine.units import WEB_PIXELS, TargetRect, parse_css_length, to_target_rect
from deckexport.errors import ResourceError
from deckexport.renderer.base import IMAGE_PLACEHOLDER_TEXT, RenderContext, SlideRenderer
from deckexport.renderer.text_renderer import normalize_line_breaks

logger = logging.getLogger(__name__)

DEFAULT_WEB_FONT = "Arial"

# Characters that could break out of a CSS declaration
_CSS_UNSAFE = re.compile(r"[;{}<>\\]")

MIME_BY_FORMAT = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
}


def format_px(value: float) -> str:
    """Format pixel value for CSS (2 decimal places, trailing zeros trimmed)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}px"


def css_safe(value: str) -> str:
    return _CSS_UNSAFE.sub("", value).strip()


@dataclass
class HtmlFragment:
    """One positioned element inside a section."""

    kind: str  # "text", "image", "video" or "shape"
    element_id: str
    style: dict[str, str] = field(default_factory=dict)
    lines: list[str] = field(default_factory=list)
    src: Optional[str] = None

    @property
    def style_attr(self) -> str:
        return "; ".join(f"{key}: {value}" for key, value in self.style.items())


@dataclass
class HtmlSection:
    """One slide of the web slideshow."""

    slide_id: str
    title: str
    attributes: dict[str, str] = field(default_factory=dict)
    fragments: list[HtmlFragment] = field(default_factory=list)
    notes: Optional[str] = None


class HtmlRenderer(SlideRenderer):
    """Renders slide elements as absolutely positioned HTML fragments."""

    target = WEB_PIXELS
    default_rect = ElementPosition(x=0, y=0, width=200, height=50)
    has_notes_channel = True

    def __init__(self, resolver: Optional[ResourceResolver] = None, inline_local_images: bool = True):
        super().__init__(resolver)
        self.inline_local_images = inline_local_images

    def element_handlers(self):
        handlers = super().element_handlers()
        handlers[ContentType.VIDEO] = self.render_video
        return handlers

    def begin_slide(self, slide: Slide, context: RenderContext, background: BackgroundSpec) -> HtmlSection:
        attributes: dict[str, str] = {}
        if background.kind == "gradient":
            attributes["data-background-gradient"] = background.css_gradient()
        elif background.kind == "image":
            attributes["data-background-color"] = token_to_css(background.color)
            try:
                attributes["data-background-image"] = self._image_src(background.image or "")
                attributes["data-background-size"] = "cover"
            except ResourceError as e:
                logger.warning(f"Slide {context.slide_index + 1}: background image unavailable ({e})")
                context.warn(f"background image unavailable: {e}")
        else:
            attributes["data-background-color"] = token_to_css(background.color)

        if slide.transition:
            attributes["data-transition"] = slide.transition

        return HtmlSection(slide_id=slide.id, title=slide.title, attributes=attributes)

    def _box_style(self, position: ElementPosition) -> dict[str, str]:
        rect: TargetRect = to_target_rect(position, self.target)
        return {
            "position": "absolute",
            "left": format_px(rect.x),
            "top": format_px(rect.y),
            "width": format_px(rect.width),
            "height": format_px(rect.height),
        }

    def _text_style(self, element: SlideContent, theme: str) -> dict[str, str]:
        style = element.style
        css = {
            "font-size": format_px(parse_css_length(style.font_size)),
            "font-family": css_safe(style.font_family or "") or DEFAULT_WEB_FONT,
            "color": token_to_css(map_color(style.color, default_text_color(theme))),
            "text-align": map_alignment(style.text_align),
        }
        if style.font_weight:
            css["font-weight"] = "bold" if style.font_weight.strip().lower() == "bold" else "normal"
        if style.font_style:
            css["font-style"] = "italic" if style.font_style.strip().lower() == "italic" else "normal"
        if style.background_color and not is_transparent(style.background_color):
            css["background-color"] = token_to_css(map_color(style.background_color, "FFFFFF"))
        return css

    def render_text(
        self,
        unit: HtmlSection,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        self._append_text(unit, element, position, element.content, context.theme)

    def _append_text(
        self,
        unit: HtmlSection,
        element: SlideContent,
        position: ElementPosition,
        text: str,
        theme: str,
    ) -> None:
        style = self._box_style(position)
        style.update(self._text_style(element, theme))
        unit.fragments.append(
            HtmlFragment(
                kind="text",
                element_id=element.id,
                style=style,
                lines=normalize_line_breaks(text).split("\n"),
            )
        )

    def _image_src(self, reference: str) -> str:
        """Keep URLs and data URIs; inline local files so the document is self-contained.

        Raises:
            ResourceError: If the reference is empty or a local file can't be read.
        """
        reference = (reference or "").strip()
        if not reference:
            raise ResourceError("empty image reference")
        scheme = urlparse(reference).scheme
        if reference.startswith("data:") or scheme in ("http", "https"):
            return reference
        if not self.inline_local_images:
            return reference

        resource = self.resolver.resolve_image(reference)
        mime = MIME_BY_FORMAT.get(resource.format.upper(), "image/png")
        encoded = base64.b64encode(resource.data).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    def render_image(
        self,
        unit: HtmlSection,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        try:
            src = self._image_src(element.content)
        except ResourceError as e:
            logger.warning(f"Slide {context.slide_index + 1}: image {element.id} replaced by placeholder ({e})")
            context.warn(f"image replaced by placeholder: {e}", element.id)
            self._append_text(unit, element, position, IMAGE_PLACEHOLDER_TEXT, "white")
            return

        style = self._box_style(position)
        style["object-fit"] = "contain"
        unit.fragments.append(HtmlFragment(kind="image", element_id=element.id, style=style, src=src))

    def render_video(
        self,
        unit: HtmlSection,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        if not element.content.strip():
            context.warn("video without source skipped", element.id)
            return
        style = self._box_style(position)
        unit.fragments.append(
            HtmlFragment(kind="video", element_id=element.id, style=style, src=element.content.strip())
        )

    def render_shape(
        self,
        unit: HtmlSection,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        style = self._box_style(position)
        fill = element.style.background_color
        style["background-color"] = (
            "transparent" if is_transparent(fill) else token_to_css(map_color(fill, SHAPE_FILL_DEFAULT))
        )
        style["border"] = f"1px solid {token_to_css(map_color(element.style.color, BLACK))}"
        style["box-sizing"] = "border-box"
        unit.fragments.append(HtmlFragment(kind="shape", element_id=element.id, style=style))

    def attach_notes(self, unit: HtmlSection, notes: str) -> None:
        unit.notes = normalize_line_breaks(notes)
