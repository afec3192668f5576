"""Tests for style mapping - every mapper must be total."""

import pytest

from deckexport.engine.style_mapper import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_GRADIENT,
    default_text_color,
    is_transparent,
    map_alignment,
    map_color,
    map_font,
    map_reveal_theme,
    map_theme,
    parse_gradient,
    token_to_rgb,
)


class TestFonts:
    """Tests for font family mapping."""

    def test_known_family(self):
        """Test a known family maps to itself."""
        assert map_font("Arial") == "Arial"
        assert map_font("times new roman") == "Times New Roman"

    def test_font_stack(self):
        """Test the first known family of a stack wins."""
        assert map_font("'Geist', system-ui, sans-serif") == "Calibri"
        assert map_font("Unknown Face, Georgia, serif") == "Georgia"

    @pytest.mark.parametrize("value", [None, "", "Comic Sans MS", "   "])
    def test_default(self, value):
        """Test unknown or missing families fall back."""
        assert map_font(value) == DEFAULT_FONT_FAMILY


class TestColors:
    """Tests for color normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#1e293b", "1E293B"),
            ("1E293B", "1E293B"),
            ("#abc", "AABBCC"),
            ("#11223380", "112233"),
            ("red", "FF0000"),
            ("rgb(17, 34, 51)", "112233"),
        ],
    )
    def test_parse(self, value, expected):
        """Test supported color notations."""
        assert map_color(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not-a-color", "#12", "rgb(x)"])
    def test_default(self, value):
        """Test unparseable input returns the default."""
        assert map_color(value) == "FFFFFF"
        assert map_color(value, default="000000") == "000000"

    def test_out_of_range_channels_clamped(self):
        """Test rgb() channels above 255 clamp to a six-digit token."""
        assert map_color("rgb(300, 0, 0)", "000000") == "FF0000"
        assert map_color("rgb(0, 999, 17)") == "00FF11"

    def test_transparent(self):
        """Test the no-fill sentinel."""
        assert is_transparent("transparent")
        assert is_transparent(" Transparent ")
        assert not is_transparent(None)
        assert not is_transparent("#FFFFFF")

    def test_default_text_color(self):
        """Test text defaults to white on dark themes."""
        assert default_text_color("black") == "FFFFFF"
        assert default_text_color("night") == "FFFFFF"
        assert default_text_color("white") == "000000"
        assert default_text_color(None) == "000000"

    def test_token_to_rgb(self):
        """Test token to RGB tuple."""
        assert token_to_rgb("112233") == (0x11, 0x22, 0x33)


class TestAlignment:
    """Tests for text alignment mapping."""

    @pytest.mark.parametrize("value", ["left", "center", "right", "justify"])
    def test_identity(self, value):
        """Test the four CSS alignments map to themselves."""
        assert map_alignment(value) == value

    @pytest.mark.parametrize("value", [None, "", "start", "middle"])
    def test_default(self, value):
        """Test anything else is left."""
        assert map_alignment(value) == "left"


class TestThemes:
    """Tests for theme backgrounds."""

    def test_white(self):
        """Test the white theme is a flat white background."""
        background = map_theme("white")
        assert background.kind == "solid"
        assert background.color == "FFFFFF"

    def test_black(self):
        """Test the black theme."""
        assert map_theme("black").color == "000000"

    @pytest.mark.parametrize("value", [None, "", "unknown-theme", "default"])
    def test_default_gradient(self, value):
        """Test unknown themes get the default gradient."""
        assert map_theme(value) == DEFAULT_GRADIENT

    def test_reveal_theme(self):
        """Test web slideshow theme names."""
        assert map_reveal_theme("night") == "night"
        assert map_reveal_theme("Moon") == "moon"
        assert map_reveal_theme("corporate") == "white"
        assert map_reveal_theme(None) == "white"


class TestGradients:
    """Tests for gradient descriptor parsing."""

    def test_linear_gradient_angle(self):
        """Test an explicit angle and two stops."""
        background = parse_gradient("linear-gradient(90deg, #112233 0%, #445566 100%)")
        assert background.is_gradient
        assert background.angle == 90.0
        assert [stop.color for stop in background.stops] == ["112233", "445566"]

    def test_linear_gradient_side(self):
        """Test a "to <side>" direction."""
        background = parse_gradient("linear-gradient(to bottom right, red, blue)")
        assert background.angle == 135.0
        assert [stop.color for stop in background.stops] == ["FF0000", "0000FF"]

    def test_linear_gradient_default_direction(self):
        """Test gradients without a direction run top to bottom."""
        assert parse_gradient("linear-gradient(#000, #fff)").angle == 180.0

    def test_rgb_stops(self):
        """Test stops written as rgb() functions."""
        background = parse_gradient("linear-gradient(45deg, rgb(1, 2, 3), rgb(4, 5, 6) 80%)")
        assert [stop.color for stop in background.stops] == ["010203", "040506"]

    def test_first_and_last_stop_kept(self):
        """Test multi-stop gradients keep their ends."""
        background = parse_gradient("linear-gradient(180deg, #111111, #222222, #333333)")
        assert [stop.color for stop in background.stops] == ["111111", "333333"]

    def test_utility_classes(self):
        """Test utility-class descriptors keep their direction."""
        background = parse_gradient("bg-gradient-to-r from-zinc-900 to-blue-950")
        assert background.is_gradient
        assert background.angle == 90.0

    def test_plain_color(self):
        """Test a non-gradient descriptor is read as a flat color."""
        background = parse_gradient("#123456")
        assert background.kind == "solid"
        assert background.color == "123456"

    @pytest.mark.parametrize("value", [None, "", "linear-gradient()", "linear-gradient(to left, nope, nada)"])
    def test_degenerate(self, value):
        """Test empty or colorless gradients fall back to the default."""
        assert parse_gradient(value) == DEFAULT_GRADIENT

    def test_css_gradient(self):
        """Test rendering back to CSS."""
        background = parse_gradient("linear-gradient(90deg, #112233, #445566)")
        assert background.css_gradient() == "linear-gradient(90deg, #112233 0%, #445566 100%)"
