"""Tests for the reveal.js HTML writer."""

import asyncio
import json
import re

import pytest

from deckexport.dsl.schema import Presentation, PresentationSettings, Slide, SlideBackground
from deckexport.renderer.base import IMAGE_PLACEHOLDER_TEXT
from deckexport.writers.html_writer import REVEAL_CONFIG_FIELDS, HtmlWriter, reveal_config

from conftest import make_element, make_text


def export_html(writer, presentation):
    artifact = asyncio.run(writer.export(presentation))
    return artifact, artifact.data.decode("utf-8")


def embedded_config(html: str) -> dict:
    """Parse the object passed to Reveal.initialize()."""
    match = re.search(r"Reveal\.initialize\((\{.*?\})\);", html, re.DOTALL)
    assert match, "no Reveal.initialize() block"
    return json.loads(match.group(1))


@pytest.fixture
def writer(export_settings, offline_resolver) -> HtmlWriter:
    return HtmlWriter(export_settings, offline_resolver)


class TestDemoScenario:
    """Tests for the minimal two-slide deck."""

    def test_two_sections(self, writer, demo_presentation):
        """Test one section per slide."""
        artifact, html = export_html(writer, demo_presentation)
        assert html.count("<section") == 2
        assert artifact.slide_count == 2
        assert artifact.filename == "Demo.html"
        assert artifact.media_type == "text/html"

    def test_auto_slide_in_config(self, writer, demo_presentation):
        """Test the config block carries autoSlide: 0."""
        _, html = export_html(writer, demo_presentation)
        assert '"autoSlide": 0' in html
        assert embedded_config(html)["autoSlide"] == 0

    def test_flat_background_attribute(self, writer, demo_presentation):
        """Test the second slide's background color attribute."""
        _, html = export_html(writer, demo_presentation)
        assert 'data-background-color="#112233"' in html

    def test_text_fragment_pixels(self, writer, demo_presentation):
        """Test text is placed with literal canvas pixels."""
        _, html = export_html(writer, demo_presentation)
        assert "left: 50px; top: 50px; width: 700px; height: 80px" in html
        assert "font-size: 16px" in html
        assert ">Hello<" in html

    def test_notes_aside(self, writer, demo_presentation):
        """Test speaker notes are embedded once."""
        _, html = export_html(writer, demo_presentation)
        assert html.count('<aside class="notes">') == 1
        assert '<aside class="notes">Say hello</aside>' in html

    def test_reveal_assets(self, writer, demo_presentation):
        """Test the pinned library version and theme stylesheet."""
        _, html = export_html(writer, demo_presentation)
        base = "https://cdnjs.cloudflare.com/ajax/libs/reveal.js/5.0.4"
        assert f"{base}/reveal.min.css" in html
        assert f"{base}/theme/white.min.css" in html
        assert f"{base}/reveal.min.js" in html
        assert "<title>Demo</title>" in html


class TestRevealConfig:
    """Tests for the script-library configuration."""

    def test_flags_copied_verbatim(self, demo_settings):
        """Test all recognised settings appear with camelCase names and their values."""
        config = reveal_config(demo_settings)
        assert len(REVEAL_CONFIG_FIELDS) == 21
        assert config["controls"] is False
        assert config["showNotes"] is False
        assert config["respondToHashChanges"] is False
        assert config["transition"] == "slide"
        assert (config["width"], config["height"], config["margin"]) == (800, 450, 0)

    def test_defaults(self):
        """Test editor defaults pass through."""
        config = reveal_config(PresentationSettings(auto_slide=5000, loop=True))
        assert config["controls"] is True
        assert config["autoSlide"] == 5000
        assert config["loop"] is True
        assert config["hideAddressBar"] is True

    def test_unrecognised_settings_excluded(self):
        """Test settings outside the recognised set are not emitted."""
        config = reveal_config(PresentationSettings())
        assert "focusBodyOnLoad" not in config
        assert "theme" not in config
        assert "title" not in config

    def test_order(self, writer, demo_presentation):
        """Test the emitted config keeps field order."""
        _, html = export_html(writer, demo_presentation)
        keys = list(embedded_config(html))
        assert keys[:3] == ["controls", "progress", "center"]
        assert keys[-3:] == ["width", "height", "margin"]


class TestElements:
    """Tests for element fragments."""

    def test_escaping(self, writer):
        """Test element text and notes are HTML-escaped."""
        slide = Slide(id="s", content=[make_text("t", "<b>bold</b> & co")], notes="a < b")
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert "&lt;b&gt;bold&lt;/b&gt; &amp; co" in html
        assert "<b>bold</b>" not in html
        assert '<aside class="notes">a &lt; b</aside>' in html

    def test_line_breaks(self, writer):
        """Test newlines become <br>."""
        slide = Slide(id="s", content=[make_text("t", "one\ntwo")])
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert "one<br>two" in html

    def test_local_image_inlined(self, writer, png_file):
        """Test local images are embedded as data URIs."""
        slide = Slide(id="s", content=[make_element("img", "image", content=str(png_file))])
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert 'src="data:image/png;base64,' in html
        assert "object-fit: contain" in html

    def test_remote_image_kept(self, writer):
        """Test URLs are referenced, not fetched."""
        slide = Slide(id="s", content=[make_element("img", "image", content="https://example.com/a.png")])
        artifact, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert 'src="https://example.com/a.png"' in html
        assert artifact.report.ok

    def test_missing_image_placeholder(self, writer):
        """Test an unreadable local image becomes placeholder text."""
        slide = Slide(id="s", content=[make_element("img", "image", content="/no/such/file.png", x=10, y=20)])
        artifact, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert IMAGE_PLACEHOLDER_TEXT in html
        assert "left: 10px; top: 20px" in html
        assert artifact.report.warnings[0].element_id == "img"

    def test_video(self, writer):
        """Test video elements are supported on the web target."""
        slide = Slide(id="s", content=[make_element("clip", "video", content="https://example.com/a.mp4")])
        artifact, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert '<video class="element element-video"' in html
        assert artifact.report.ok

    def test_shape(self, writer):
        """Test shape fill and border."""
        slide = Slide(id="s", content=[make_element("box", "shape", background_color="#00ff00")])
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert "background-color: #00FF00" in html
        assert "border: 1px solid #000000" in html

    def test_gradient_background(self, writer):
        """Test gradient backgrounds use the gradient attribute."""
        slide = Slide(id="s", background=SlideBackground(gradient="linear-gradient(90deg, #112233, #445566)"))
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert 'data-background-gradient="linear-gradient(90deg, #112233 0%, #445566 100%)"' in html

    def test_local_background_image_inlined(self, writer, png_file):
        """Test local background images are embedded like element images."""
        slide = Slide(id="s", background=SlideBackground(image=str(png_file)))
        artifact, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert 'data-background-image="data:image/png;base64,' in html
        assert str(png_file) not in html
        assert artifact.report.ok

    def test_missing_background_image_falls_back(self, writer):
        """Test an unreadable background image leaves the theme color."""
        slide = Slide(id="s", background=SlideBackground(image="/no/such/bg.png"))
        artifact, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert "data-background-image" not in html
        assert 'data-background-color="#FFFFFF"' in html
        assert len(artifact.report.warnings) == 1

    def test_slide_transition(self, writer):
        """Test per-slide transitions."""
        slide = Slide(id="s", transition="zoom")
        _, html = export_html(writer, Presentation(id="p", slides=[slide]))
        assert 'data-transition="zoom"' in html

    def test_z_order(self, writer, layered_slide):
        """Test fragments follow element order."""
        _, html = export_html(writer, Presentation(id="p", slides=[layered_slide]))
        positions = [html.index(f'data-element-id="{element_id}"') for element_id in ("bottom-shape", "middle-text", "top-image")]
        assert positions == sorted(positions)
