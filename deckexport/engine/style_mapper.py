"""Map editor styling onto each target's vocabulary.

Every function here is total: any input, including None, empty strings and
values missing from the lookup tables, yields a valid native value.

Colors travel through the pipeline as *tokens*: six uppercase hex digits
without a leading "#" (e.g. ``"1E293B"``).
"""

import re
from dataclasses import dataclass, field
from typing import Literal, Optional

from PIL import ImageColor


# =============================================================================
# FONTS
# =============================================================================

DEFAULT_FONT_FAMILY = "Calibri"

FONT_MAP: dict[str, str] = {
    "arial": "Arial",
    "helvetica": "Helvetica",
    "times new roman": "Times New Roman",
    "georgia": "Georgia",
    "verdana": "Verdana",
    "courier new": "Courier New",
    "geist": "Calibri",
    "sans-serif": "Calibri",
    "serif": "Times New Roman",
    "monospace": "Courier New",
}


def map_font(name: Optional[str]) -> str:
    """Map a CSS font family (or font stack) to an office font name.

    The first family in a stack that the table knows wins; unknown families
    fall back to :data:`DEFAULT_FONT_FAMILY`.
    """
    if not name:
        return DEFAULT_FONT_FAMILY

    for family in name.split(","):
        key = family.strip().strip("'\"").lower()
        if key in FONT_MAP:
            return FONT_MAP[key]
    return DEFAULT_FONT_FAMILY


# =============================================================================
# COLORS
# =============================================================================

BLACK = "000000"
WHITE = "FFFFFF"
SHAPE_FILL_DEFAULT = "CCCCCC"
TRANSPARENT = "transparent"

DARK_THEMES = frozenset({"black", "league", "night"})

_HEX6 = re.compile(r"^[0-9A-Fa-f]{6}$")
_HEX3 = re.compile(r"^[0-9A-Fa-f]{3}$")


def map_color(value: Optional[str], default: str = WHITE) -> str:
    """Normalize a CSS color into a hex token.

    "#1e293b" -> "1E293B", "#abc" -> "AABBCC"; CSS names and rgb()/hsl()
    functions are resolved through Pillow. Missing or unparseable input
    returns ``default``.
    """
    if not value:
        return default

    raw = value.strip()
    stripped = raw.lstrip("#")
    if _HEX6.match(stripped):
        return stripped.upper()
    if _HEX3.match(stripped):
        return "".join(ch * 2 for ch in stripped).upper()
    # 8-digit hex carries alpha; drop it
    if len(stripped) == 8 and _HEX6.match(stripped[:6]):
        return stripped[:6].upper()

    try:
        rgb = ImageColor.getrgb(raw)
    except ValueError:
        return default
    # rgb() channels outside 0-255 come back unclamped
    return "{:02X}{:02X}{:02X}".format(*(min(max(channel, 0), 255) for channel in rgb[:3]))


def is_transparent(value: Optional[str]) -> bool:
    """True for the editor's "no fill" sentinel."""
    return bool(value) and value.strip().lower() == TRANSPARENT


def default_text_color(theme: Optional[str]) -> str:
    """Text color used when an element has none: white on dark themes."""
    return WHITE if (theme or "").lower() in DARK_THEMES else BLACK


def token_to_rgb(token: str) -> tuple[int, int, int]:
    """Convert a hex token to an RGB tuple (0-255)."""
    token = map_color(token, BLACK)
    return tuple(int(token[i:i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


def token_to_css(token: str) -> str:
    """Convert a hex token to a CSS color string."""
    return f"#{token}"


# =============================================================================
# ALIGNMENT
# =============================================================================

Alignment = Literal["left", "center", "right", "justify"]

ALIGNMENTS: dict[str, Alignment] = {
    "left": "left",
    "center": "center",
    "right": "right",
    "justify": "justify",
}


def map_alignment(value: Optional[str]) -> Alignment:
    """Identity over the four CSS alignments; anything else is "left"."""
    if not value:
        return "left"
    return ALIGNMENTS.get(value.strip().lower(), "left")


# =============================================================================
# BACKGROUNDS AND THEMES
# =============================================================================


@dataclass(frozen=True)
class GradientStop:
    """A gradient color stop; position is 0-1."""

    color: str
    position: float


@dataclass(frozen=True)
class BackgroundSpec:
    """Resolved slide background.

    ``kind`` is "solid", "gradient" or "image". ``color`` is always set so a
    target that cannot draw gradients or images still has a flat fallback.
    ``angle`` is a CSS angle in degrees.
    """

    kind: Literal["solid", "gradient", "image"]
    color: str
    angle: float = 135.0
    stops: tuple[GradientStop, ...] = field(default_factory=tuple)
    image: Optional[str] = None

    @property
    def is_gradient(self) -> bool:
        return self.kind == "gradient"

    def css_gradient(self) -> str:
        """Render the gradient as a CSS ``linear-gradient()`` value."""
        stops = ", ".join(
            f"{token_to_css(stop.color)} {stop.position * 100:g}%" for stop in self.stops
        )
        return f"linear-gradient({self.angle:g}deg, {stops})"


def solid_background(color: str) -> BackgroundSpec:
    return BackgroundSpec(kind="solid", color=color)


def gradient_background(start: str, end: str, angle: float = 135.0) -> BackgroundSpec:
    return BackgroundSpec(
        kind="gradient",
        color=start,
        angle=angle,
        stops=(GradientStop(start, 0.0), GradientStop(end, 1.0)),
    )


# zinc-900 -> blue-950, towards bottom-right
DEFAULT_GRADIENT = gradient_background("1E293B", "1E3A8A", 135.0)

THEME_BACKGROUNDS: dict[str, BackgroundSpec] = {
    "white": solid_background("FFFFFF"),
    "black": solid_background("000000"),
    "league": solid_background("2B2B2B"),
    "beige": solid_background("F7F3DE"),
    "sky": solid_background("E6F3FF"),
    "night": solid_background("1A1A2E"),
    "serif": solid_background("F5F5F5"),
    "simple": solid_background("FFFFFF"),
    "default": DEFAULT_GRADIENT,
}


def map_theme(theme: Optional[str]) -> BackgroundSpec:
    """Background for a theme identifier; unknown themes get the default gradient."""
    if not theme:
        return DEFAULT_GRADIENT
    return THEME_BACKGROUNDS.get(theme.strip().lower(), DEFAULT_GRADIENT)


# Utility-class direction suffixes, as CSS angles
DIRECTION_ANGLES: dict[str, float] = {
    "t": 0.0,
    "tr": 45.0,
    "r": 90.0,
    "br": 135.0,
    "b": 180.0,
    "bl": 225.0,
    "l": 270.0,
    "tl": 315.0,
}

_SIDE_ANGLES: dict[str, float] = {
    "top": 0.0,
    "top right": 45.0,
    "right top": 45.0,
    "right": 90.0,
    "bottom right": 135.0,
    "right bottom": 135.0,
    "bottom": 180.0,
    "bottom left": 225.0,
    "left bottom": 225.0,
    "left": 270.0,
    "top left": 315.0,
    "left top": 315.0,
}

_LINEAR_GRADIENT = re.compile(r"linear-gradient\((?P<args>.*)\)\s*$", re.IGNORECASE | re.DOTALL)
_UTILITY_DIRECTION = re.compile(r"gradient-to-(?P<dir>tr|tl|br|bl|t|r|b|l)\b")
_ANGLE = re.compile(r"^(-?\d+(?:\.\d+)?)deg$", re.IGNORECASE)


def _split_gradient_args(args: str) -> list[str]:
    """Split on commas that are not inside parentheses (rgb(...) stops)."""
    parts, depth, current = [], 0, []
    for ch in args:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _stop_color(stop: str) -> Optional[str]:
    # "#112233 40%" -> "#112233"; "rgb(1, 2, 3) 10%" keeps the function intact
    if ")" in stop:
        color = stop[: stop.rindex(")") + 1]
    else:
        color = stop.split()[0]
    token = map_color(color, default="")
    return token or None


def parse_gradient(descriptor: Optional[str]) -> BackgroundSpec:
    """Interpret a slide gradient descriptor.

    Handles CSS ``linear-gradient(<angle>|to <side>, <c1>, <c2>, ...)`` (first
    and last stops are kept) and utility-class strings such as
    "bg-gradient-to-br from-zinc-900 to-blue-950", whose palette classes are
    not resolvable here and map to the default colors with the named
    direction. A descriptor that is not a gradient is read as a flat color.
    """
    if not descriptor:
        return DEFAULT_GRADIENT

    text = descriptor.strip()
    match = _LINEAR_GRADIENT.search(text)
    if match:
        args = _split_gradient_args(match.group("args"))
        angle = 180.0
        if args:
            head = args[0].strip().lower()
            angle_match = _ANGLE.match(head)
            if angle_match:
                angle = float(angle_match.group(1)) % 360.0
                args = args[1:]
            elif head.startswith("to "):
                angle = _SIDE_ANGLES.get(" ".join(head[3:].split()), 180.0)
                args = args[1:]

        colors = [c for c in (_stop_color(a) for a in args) if c]
        if len(colors) >= 2:
            return gradient_background(colors[0], colors[-1], angle)
        if len(colors) == 1:
            return solid_background(colors[0])
        return DEFAULT_GRADIENT

    if "gradient" in text:
        direction = _UTILITY_DIRECTION.search(text)
        angle = DIRECTION_ANGLES[direction.group("dir")] if direction else DEFAULT_GRADIENT.angle
        start, end = DEFAULT_GRADIENT.stops
        return gradient_background(start.color, end.color, angle)

    return solid_background(map_color(text, WHITE))


# =============================================================================
# WEB SLIDESHOW THEMES
# =============================================================================

REVEAL_THEMES = frozenset({
    "black", "white", "league", "beige", "sky", "night", "serif", "simple",
    "solarized", "moon", "dracula", "blood",
})

DEFAULT_REVEAL_THEME = "white"


def map_reveal_theme(theme: Optional[str]) -> str:
    """Theme stylesheet name shipped with the slideshow library."""
    if not theme:
        return DEFAULT_REVEAL_THEME
    key = theme.strip().lower()
    return key if key in REVEAL_THEMES else DEFAULT_REVEAL_THEME
