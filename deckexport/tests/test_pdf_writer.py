"""Tests for the PDF writer and the raster capture loop."""

import asyncio
import re

import pytest

from deckexport.dsl.schema import Presentation, Slide
from deckexport.errors import ExportCancelled, ExportError
from deckexport.renderer.raster_renderer import RasterSurface
from deckexport.writers.pdf_writer import PdfWriter, page_size

from conftest import make_text

PAGE_OBJECT = re.compile(rb"/Type\s*/Page[^s]")


class TrackingSurface(RasterSurface):
    """RasterSurface that records how many surfaces are alive at once."""

    live = 0
    max_live = 0
    created = []

    def __init__(self, target):
        super().__init__(target)
        TrackingSurface.live += 1
        TrackingSurface.max_live = max(TrackingSurface.max_live, TrackingSurface.live)
        TrackingSurface.created.append(self)

    def close(self):
        if not self.closed:
            TrackingSurface.live -= 1
        super().close()


class FailingSurface(TrackingSurface):
    """Surface whose capture always fails."""

    def capture(self, fmt="PNG"):
        raise RuntimeError("capture exploded")


@pytest.fixture(autouse=True)
def reset_tracking():
    TrackingSurface.live = 0
    TrackingSurface.max_live = 0
    TrackingSurface.created = []
    yield


def count_pages(data: bytes) -> int:
    return len(PAGE_OBJECT.findall(data))


class TestDemoScenario:
    """Tests for the minimal two-slide deck."""

    def test_two_pages(self, export_settings, offline_resolver, demo_presentation):
        """Test one page per slide."""
        writer = PdfWriter(export_settings, offline_resolver)
        artifact = asyncio.run(writer.export(demo_presentation))

        assert artifact.data.startswith(b"%PDF")
        assert count_pages(artifact.data) == 2
        assert artifact.slide_count == 2
        assert artifact.filename == "Demo.pdf"
        assert artifact.media_type == "application/pdf"

    def test_notes_annotation(self, export_settings, offline_resolver, demo_presentation):
        """Test notes are attached as a text annotation when enabled."""
        writer = PdfWriter(export_settings, offline_resolver)
        artifact = asyncio.run(writer.export(demo_presentation))
        assert b"/Annot" in artifact.data

    def test_notes_disabled(self, export_settings, offline_resolver, demo_presentation):
        """Test notes can be left out."""
        settings = export_settings.model_copy(update={"pdf_embed_notes": False})
        artifact = asyncio.run(PdfWriter(settings, offline_resolver).export(demo_presentation))
        assert b"/Annot" not in artifact.data


class TestSurfaceLifecycle:
    """Tests for off-screen surface handling."""

    def test_one_surface_at_a_time(self, export_settings, offline_resolver, demo_presentation):
        """Test surfaces are created and closed strictly one after another."""
        writer = PdfWriter(export_settings, offline_resolver, surface_factory=TrackingSurface)
        asyncio.run(writer.export(demo_presentation))

        assert len(TrackingSurface.created) == 2
        assert TrackingSurface.max_live == 1
        assert TrackingSurface.live == 0
        assert all(surface.closed for surface in TrackingSurface.created)

    def test_failed_capture_closes_surface_and_skips(self, export_settings, offline_resolver, demo_presentation):
        """Test a failing capture still tears the surface down and skips the page."""

        def factory(target):
            # Second slide fails
            if len(TrackingSurface.created) == 1:
                return FailingSurface(target)
            return TrackingSurface(target)

        writer = PdfWriter(export_settings, offline_resolver, surface_factory=factory)
        artifact = asyncio.run(writer.export(demo_presentation))

        assert count_pages(artifact.data) == 1
        assert artifact.slide_count == 1
        assert artifact.report.skipped_slides == [1]
        assert "capture exploded" in artifact.report.warnings[-1].message
        assert all(surface.closed for surface in TrackingSurface.created)

    def test_all_captures_fail(self, export_settings, offline_resolver, demo_presentation):
        """Test a document with no pages is an error."""
        writer = PdfWriter(export_settings, offline_resolver, surface_factory=FailingSurface)
        with pytest.raises(ExportError):
            asyncio.run(writer.export(demo_presentation))
        assert TrackingSurface.live == 0

    def test_cancel_between_slides(self, export_settings, offline_resolver, demo_presentation):
        """Test a cancel request stops the export before the next slide."""
        cancel = asyncio.Event()

        def factory(target):
            cancel.set()
            return TrackingSurface(target)

        writer = PdfWriter(export_settings, offline_resolver, surface_factory=factory)
        with pytest.raises(ExportCancelled):
            asyncio.run(writer.export(demo_presentation, cancel_event=cancel))

        assert len(TrackingSurface.created) == 1
        assert TrackingSurface.live == 0


class TestPdfWriter:
    """Tests for page setup and errors."""

    def test_landscape_a4(self):
        """Test page sizes are landscape."""
        width, height = page_size("A4")
        assert width > height
        assert round(width) == 842

    def test_unknown_page_size(self):
        """Test unknown names fall back to A4."""
        assert page_size("tabloid-ish") == page_size("A4")

    def test_empty_presentation(self, export_settings):
        """Test a deck without slides is rejected."""
        with pytest.raises(ExportError, match="no slides"):
            asyncio.run(PdfWriter(export_settings).export(Presentation(id="empty")))

    def test_missing_image_still_renders(self, export_settings, offline_resolver):
        """Test a broken image is replaced rather than failing the page."""
        slide = Slide(
            id="s",
            content=[
                make_text("t", "Caption"),
                make_text("t2", "Second", y=200).model_copy(update={"type": "image", "content": "/nope.png"}),
            ],
        )
        artifact = asyncio.run(PdfWriter(export_settings, offline_resolver).export(Presentation(id="p", slides=[slide])))
        assert count_pages(artifact.data) == 1
        assert artifact.report.warnings[0].element_id == "t2"
