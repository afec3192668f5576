"""
raster_renderer.py — Draw slides onto an off-screen Pillow surface.

Used by the paginated-document and image-set writers. A surface is created
per slide, drawn, captured to PNG and closed before the next slide starts;
nothing here is shared between slides or between export calls.
"""

import io
import logging
import math
from functools import lru_cache
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from deckexport.dsl.schema import ElementPosition, Slide, SlideContent
from deckexport.engine.resources import ResourceResolver
from deckexport.engine.style_mapper import (
    BLACK,
    SHAPE_FILL_DEFAULT,
    WHITE,
    BackgroundSpec,
    default_text_color,
    is_transparent,
    map_alignment,
    map_color,
    map_font,
    token_to_rgb,
)
from deckexport.engine.units import (
    TargetRect,
    TargetSpec,
    fit_contain,
    font_size_to_pixels,
    parse_css_length,
    raster_target,
    to_target_rect,
)
from deckexport.errors import ResourceError
from deckexport.renderer.base import IMAGE_PLACEHOLDER_TEXT, RenderContext, SlideRenderer
from deckexport.renderer.text_renderer import explicit_flag, normalize_line_breaks

logger = logging.getLogger(__name__)

LINE_HEIGHT = 1.2

# Font files tried per family, regular then bold. Pillow searches the
# platform font directories for bare file names.
FONT_FILES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "Arial": (
        ("arial.ttf", "Arial.ttf", "LiberationSans-Regular.ttf"),
        ("arialbd.ttf", "Arial Bold.ttf", "LiberationSans-Bold.ttf"),
    ),
    "Helvetica": (
        ("Helvetica.ttc", "LiberationSans-Regular.ttf"),
        ("Helvetica-Bold.ttf", "LiberationSans-Bold.ttf"),
    ),
    "Times New Roman": (
        ("times.ttf", "Times New Roman.ttf", "LiberationSerif-Regular.ttf"),
        ("timesbd.ttf", "Times New Roman Bold.ttf", "LiberationSerif-Bold.ttf"),
    ),
    "Georgia": (("georgia.ttf", "Georgia.ttf"), ("georgiab.ttf", "Georgia Bold.ttf")),
    "Verdana": (("verdana.ttf", "Verdana.ttf"), ("verdanab.ttf", "Verdana Bold.ttf")),
    "Courier New": (
        ("cour.ttf", "Courier New.ttf", "LiberationMono-Regular.ttf"),
        ("courbd.ttf", "Courier New Bold.ttf", "LiberationMono-Bold.ttf"),
    ),
    "Calibri": (
        ("calibri.ttf", "Calibri.ttf", "Carlito-Regular.ttf"),
        ("calibrib.ttf", "Calibri Bold.ttf", "Carlito-Bold.ttf"),
    ),
}
FALLBACK_FONT_FILES = (("DejaVuSans.ttf",), ("DejaVuSans-Bold.ttf",))


@lru_cache(maxsize=128)
def load_font(family: str, size: int, bold: bool = False) -> ImageFont.ImageFont:
    """Load a TrueType font for a mapped family, falling back to Pillow's default."""
    regular, heavy = FONT_FILES.get(family, FALLBACK_FONT_FILES)
    candidates = (heavy if bold else regular) + (FALLBACK_FONT_FILES[1] if bold else FALLBACK_FONT_FILES[0])
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


class RasterSurface:
    """Off-screen drawing surface for one slide.

    Use as a context manager, or call :meth:`close` in a ``finally`` block.
    """

    def __init__(self, target: TargetSpec):
        self.target = target
        self.image = Image.new("RGB", (int(target.width), int(target.height)), "white")
        self.draw = ImageDraw.Draw(self.image)
        self.closed = False

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def capture(self, fmt: str = "PNG") -> bytes:
        """Encode the current surface contents."""
        if self.closed:
            raise RuntimeError("surface already closed")
        buffer = io.BytesIO()
        self.image.save(buffer, format=fmt)
        return buffer.getvalue()

    def close(self) -> None:
        if not self.closed:
            self.image.close()
            self.closed = True

    def __enter__(self) -> "RasterSurface":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _box(rect: TargetRect) -> tuple[int, int, int, int]:
    return (
        int(round(rect.x)),
        int(round(rect.y)),
        int(round(rect.x + rect.width)),
        int(round(rect.y + rect.height)),
    )


def wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> list[str]:
    """Greedy word wrap; explicit line breaks are kept."""
    lines: list[str] = []
    for paragraph in normalize_line_breaks(text).split("\n"):
        words = paragraph.split(" ")
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if current and draw.textlength(candidate, font=font) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


class RasterRenderer(SlideRenderer):
    """Draws slide elements onto a :class:`RasterSurface`."""

    default_rect = ElementPosition(x=0, y=0, width=200, height=50)
    has_notes_channel = False

    def __init__(self, surface: RasterSurface, resolver: Optional[ResourceResolver] = None):
        super().__init__(resolver)
        self.surface = surface
        self.target = surface.target

    @property
    def oversample(self) -> float:
        return self.target.width / raster_target(1).width

    def begin_slide(self, slide: Slide, context: RenderContext, background: BackgroundSpec) -> RasterSurface:
        surface = self.surface
        if background.kind == "gradient":
            self._paint_gradient(background)
        elif background.kind == "image":
            self._paint_image_background(background, context)
        else:
            surface.draw.rectangle([(0, 0), surface.size], fill=token_to_rgb(background.color))
        return surface

    def _paint_gradient(self, background: BackgroundSpec) -> None:
        """Two-stop linear gradient via a rotated grayscale ramp."""
        surface = self.surface
        width, height = surface.size
        start = Image.new("RGB", (width, height), token_to_rgb(background.stops[0].color))
        end = Image.new("RGB", (width, height), token_to_rgb(background.stops[-1].color))

        # CSS gradient line length for this angle; the ramp spans exactly that
        radians = math.radians(background.angle)
        length = abs(width * math.sin(radians)) + abs(height * math.cos(radians))
        side = int(math.ceil(math.hypot(width, height)))
        band = max(1, int(round(length)))
        band_top = (side - band) // 2

        # linear_gradient runs black (top) to white (bottom): CSS 180deg.
        ramp = Image.new("L", (side, side), 0)
        if band_top + band < side:
            ramp.paste(255, (0, band_top + band, side, side))
        with Image.linear_gradient("L") as gradient:
            ramp.paste(gradient.resize((side, band)), (0, band_top))
        ramp = ramp.rotate(180.0 - background.angle, resample=Image.Resampling.BICUBIC)
        left = (side - width) // 2
        top = (side - height) // 2
        mask = ramp.crop((left, top, left + width, top + height))

        surface.image.paste(Image.composite(end, start, mask))
        for img in (start, end, ramp, mask):
            img.close()

    def _paint_image_background(self, background: BackgroundSpec, context: RenderContext) -> None:
        surface = self.surface
        surface.draw.rectangle([(0, 0), surface.size], fill=token_to_rgb(background.color))
        try:
            resource = self.resolver.resolve_image(background.image or "")
            with Image.open(resource.stream()) as img:
                scaled = img.convert("RGBA").resize(surface.size)
                surface.image.paste(scaled, (0, 0), scaled)
        except (ResourceError, OSError) as e:
            logger.warning(f"Slide {context.slide_index + 1}: background image unavailable ({e})")
            context.warn(f"background image unavailable: {e}")

    def render_text(
        self,
        unit: RasterSurface,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        self._draw_text(unit, element, to_target_rect(position, self.target), element.content, context.theme)

    def _draw_text(
        self,
        unit: RasterSurface,
        element: SlideContent,
        rect: TargetRect,
        text: str,
        theme: str,
    ) -> None:
        style = element.style
        if style.background_color and not is_transparent(style.background_color):
            unit.draw.rectangle(_box(rect), fill=token_to_rgb(map_color(style.background_color, WHITE)))

        size = font_size_to_pixels(parse_css_length(style.font_size), self.target)
        font = load_font(map_font(style.font_family), size, bool(explicit_flag(style.font_weight, "bold")))
        color = token_to_rgb(map_color(style.color, default_text_color(theme)))
        alignment = map_alignment(style.text_align)

        # Draw on a box-sized layer so overflowing text is clipped to the box
        left, top, right, bottom = _box(rect)
        if right <= left or bottom <= top:
            return
        layer = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        layer_draw = ImageDraw.Draw(layer)

        y = rect.y - top
        for line in wrap_text(unit.draw, text, font, rect.width):
            if y >= layer.height:
                break
            line_width = unit.draw.textlength(line, font=font)
            if alignment == "center":
                x = (rect.width - line_width) / 2
            elif alignment == "right":
                x = rect.width - line_width
            else:
                x = 0
            layer_draw.text((x + rect.x - left, y), line, font=font, fill=color)
            y += size * LINE_HEIGHT

        unit.image.paste(layer, (left, top), layer)
        layer.close()

    def render_image(
        self,
        unit: RasterSurface,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        rect = to_target_rect(position, self.target)
        try:
            resource = self.resolver.resolve_image(element.content)
            with Image.open(resource.stream()) as img:
                fitted = fit_contain(img.width, img.height, rect)
                left, top, right, bottom = _box(fitted)
                scaled = img.convert("RGBA").resize((max(right - left, 1), max(bottom - top, 1)))
                unit.image.paste(scaled, (left, top), scaled)
        except (ResourceError, OSError) as e:
            logger.warning(f"Slide {context.slide_index + 1}: image {element.id} replaced by placeholder ({e})")
            context.warn(f"image replaced by placeholder: {e}", element.id)
            self._draw_text(unit, element, rect, IMAGE_PLACEHOLDER_TEXT, "white")

    def render_shape(
        self,
        unit: RasterSurface,
        element: SlideContent,
        position: ElementPosition,
        context: RenderContext,
    ) -> None:
        style = element.style
        fill = None
        if not is_transparent(style.background_color):
            fill = token_to_rgb(map_color(style.background_color, SHAPE_FILL_DEFAULT))
        unit.draw.rectangle(
            _box(to_target_rect(position, self.target)),
            fill=fill,
            outline=token_to_rgb(map_color(style.color, BLACK)),
            width=max(1, int(round(self.oversample))),
        )
