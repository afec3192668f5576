"""
units.py — Canvas-to-target conversions and layout constants.

This is the foundation module. ALL positioning and font-size math uses these
constants and functions. Never hardcode unit conversions anywhere else.

Every element position is expressed on the canonical 800x450 editor canvas.
Each export target has its own native unit space (inches for the office
document, pixels for raster capture and web markup, percent for responsive
markup); the two canvas axes normalize independently.
"""

import math
import re
from dataclasses import dataclass
from typing import Literal

from deckexport.dsl.schema import CANVAS_HEIGHT_PX, CANVAS_WIDTH_PX, ElementPosition

Axis = Literal["x", "y"]

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

CSS_PX_PER_INCH = 96
PT_PER_INCH = 72
MM_PER_INCH = 25.4
EMU_PER_INCH = 914400
EMU_PER_PT = 12700

# CSS pixel -> typographic point
PT_PER_PX = PT_PER_INCH / CSS_PX_PER_INCH  # 0.75

# Root font size used to resolve em/rem lengths
CSS_ROOT_FONT_PX = 16.0

UNITS_PER_INCH: dict[str, float] = {
    "in": 1.0,
    "pt": PT_PER_INCH,
    "mm": MM_PER_INCH,
    "px": CSS_PX_PER_INCH,
}


def inches_to_emu(inches: float) -> int:
    """Convert inches to EMUs. Use this for all office-document positions."""
    return int(round(inches * EMU_PER_INCH))


def emu_to_inches(emu: int) -> float:
    """Convert EMUs to inches."""
    return emu / EMU_PER_INCH


def mm_to_pt(mm: float) -> float:
    """Convert millimetres to points (PDF page units)."""
    return mm / MM_PER_INCH * PT_PER_INCH


def round_half_up(value: float) -> int:
    """Round halves away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# TARGET SPACES
# =============================================================================


@dataclass(frozen=True)
class TargetSpec:
    """Native coordinate space of one export target."""

    name: str
    width: float
    height: float
    unit: str  # "in", "pt", "mm", "px" or "%"

    def axis_size(self, axis: Axis) -> float:
        return self.width if axis == "x" else self.height

    @property
    def width_inches(self) -> float | None:
        """Physical width in inches, or None for relative (percent) spaces."""
        per_inch = UNITS_PER_INCH.get(self.unit)
        if per_inch is None:
            return None
        return self.width / per_inch


# Office document: 16:9 widescreen at 10in wide
OFFICE_SLIDE = TargetSpec("pptx", 10.0, 5.625, "in")

# Web markup, literal pixels on the canonical canvas
WEB_PIXELS = TargetSpec("html", float(CANVAS_WIDTH_PX), float(CANVAS_HEIGHT_PX), "px")

# Web markup, relative to the slide box
WEB_PERCENT = TargetSpec("html-percent", 100.0, 100.0, "%")


def raster_target(oversample: int = 2) -> TargetSpec:
    """Pixel space of an off-screen capture surface at ``oversample``x."""
    return TargetSpec(
        "raster",
        float(CANVAS_WIDTH_PX * oversample),
        float(CANVAS_HEIGHT_PX * oversample),
        "px",
    )


def _canvas_axis_size(axis: Axis) -> float:
    return float(CANVAS_WIDTH_PX if axis == "x" else CANVAS_HEIGHT_PX)


def to_target_unit(pixel: float, axis: Axis, target: TargetSpec) -> float:
    """Convert a canvas pixel value to the target's native unit.

    native = pixel / canvas_axis_size * target_axis_size
    """
    return pixel / _canvas_axis_size(axis) * target.axis_size(axis)


def to_pixel(native: float, axis: Axis, target: TargetSpec) -> float:
    """Inverse of :func:`to_target_unit`."""
    return native / target.axis_size(axis) * _canvas_axis_size(axis)


@dataclass(frozen=True)
class TargetRect:
    """A rectangle in a target's native unit."""

    x: float
    y: float
    width: float
    height: float


def to_target_rect(position: ElementPosition, target: TargetSpec) -> TargetRect:
    """Convert a canvas rectangle to the target's native unit."""
    return TargetRect(
        x=to_target_unit(position.x, "x", target),
        y=to_target_unit(position.y, "y", target),
        width=to_target_unit(position.width, "x", target),
        height=to_target_unit(position.height, "y", target),
    )


def to_canvas_position(rect: TargetRect, target: TargetSpec) -> ElementPosition:
    """Convert a native rectangle back to canvas pixels."""
    return ElementPosition(
        x=to_pixel(rect.x, "x", target),
        y=to_pixel(rect.y, "y", target),
        width=to_pixel(rect.width, "x", target),
        height=to_pixel(rect.height, "y", target),
    )


# =============================================================================
# FONT SIZES
# =============================================================================

DEFAULT_FONT_SIZE_PX = 16.0

_CSS_LENGTH = re.compile(r"^\s*(-?\d+(?:\.\d+)?|-?\.\d+)\s*(px|pt|em|rem)?\s*$", re.IGNORECASE)


def parse_css_length(value: str | float | int | None, default: float = DEFAULT_FONT_SIZE_PX) -> float:
    """Parse a CSS length such as "24px" into canvas pixels.

    Accepts px, pt, em and rem suffixes and bare numbers. Anything else,
    including non-positive sizes, yields ``default``.
    """
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else default

    match = _CSS_LENGTH.match(value)
    if not match:
        return default

    number = float(match.group(1))
    unit = (match.group(2) or "px").lower()
    if unit == "pt":
        number = number / PT_PER_PX
    elif unit in ("em", "rem"):
        number = number * CSS_ROOT_FONT_PX

    return number if number > 0 else default


def font_scale_factor(target: TargetSpec) -> float:
    """Ratio of target width to canvas width, both in inches.

    The canonical canvas is 800 CSS pixels wide, i.e. 800/96 inches.
    """
    width_in = target.width_inches
    if width_in is None:
        return 1.0
    return width_in / (CANVAS_WIDTH_PX / CSS_PX_PER_INCH)


def font_size_to_points(pixels: float, target: TargetSpec) -> int:
    """Convert a canvas font size to points on ``target``.

    points = round(pixels * 0.75 * scale_factor). With the same scale factor
    as the positional path, a font sized to fill its box still fills it.
    """
    return round_half_up(pixels * PT_PER_PX * font_scale_factor(target))


def font_size_to_pixels(pixels: float, target: TargetSpec) -> int:
    """Convert a canvas font size to pixels on a pixel target (raster surfaces)."""
    scale = target.width / CANVAS_WIDTH_PX if target.unit == "px" else 1.0
    return max(1, round_half_up(pixels * scale))


# =============================================================================
# FITTING
# =============================================================================


def fit_contain(src_width: float, src_height: float, box: TargetRect) -> TargetRect:
    """Largest rectangle with the source aspect ratio centred inside ``box``."""
    if src_width <= 0 or src_height <= 0 or box.width <= 0 or box.height <= 0:
        return box

    scale = min(box.width / src_width, box.height / src_height)
    width = src_width * scale
    height = src_height * scale
    return TargetRect(
        x=box.x + (box.width - width) / 2,
        y=box.y + (box.height - height) / 2,
        width=width,
        height=height,
    )


def fit_page(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    margin: float,
) -> TargetRect:
    """Place an image on a page inside ``margin``, preserving aspect ratio."""
    area = TargetRect(
        x=margin,
        y=margin,
        width=max(page_width - 2 * margin, 0.0),
        height=max(page_height - 2 * margin, 0.0),
    )
    return fit_contain(image_width, image_height, area)


# =============================================================================
# ANGLES
# =============================================================================


def css_angle_to_drawingml(css_degrees: float) -> float:
    """Convert a CSS gradient angle to a DrawingML linear angle.

    CSS measures clockwise from "to top"; DrawingML measures clockwise from
    "to right". 135deg (towards bottom-right) becomes 45.
    """
    return (css_degrees - 90.0) % 360.0

