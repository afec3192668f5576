"""
service.py — Export entry points used by the editor.

Every export, including the current-slide and selected-slides variants, goes
through the same writers. Partial exports wrap their slides in a synthetic
presentation and delegate.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Optional, Sequence

from deckexport.config import ExportSettings, get_settings
from deckexport.dsl.schema import Presentation, PresentationSettings, Slide
from deckexport.engine.resources import ResourceResolver
from deckexport.errors import ExportError
from deckexport.writers.base import DocumentWriter, ExportArtifact, SurfaceFactory
from deckexport.writers.html_writer import HtmlWriter
from deckexport.writers.image_writer import ImageSetWriter
from deckexport.writers.pdf_writer import PdfWriter
from deckexport.writers.pptx_writer import PptxWriter

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("pdf", "images", "html", "pptx")

# Accepted spellings for each format
FORMAT_ALIASES = {
    "pdf": "pdf",
    "images": "images",
    "image": "images",
    "png": "images",
    "html": "html",
    "reveal": "html",
    "pptx": "pptx",
    "powerpoint": "pptx",
}


def normalize_format(fmt: str) -> str:
    """Canonical format name.

    Raises:
        ExportError: If the format is not supported.
    """
    name = FORMAT_ALIASES.get((fmt or "").strip().lower())
    if name is None:
        raise ExportError(
            f"Unsupported export format '{fmt}'. Supported: {', '.join(EXPORT_FORMATS)}"
        )
    return name


class ExportService:
    """Dispatches presentations to the document writers.

    Methods return awaitables rather than being coroutines so the
    presentation is copied at call time, before anything is awaited.
    """

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        resolver: Optional[ResourceResolver] = None,
        surface_factory: Optional[SurfaceFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.writers: dict[str, DocumentWriter] = {
            "pdf": PdfWriter(self.settings, resolver, surface_factory),
            "images": ImageSetWriter(self.settings, resolver, surface_factory),
            "html": HtmlWriter(self.settings, resolver),
            "pptx": PptxWriter(self.settings, resolver),
        }

    def writer_for(self, fmt: str) -> DocumentWriter:
        return self.writers[normalize_format(fmt)]

    def export(
        self,
        presentation: Presentation,
        fmt: str,
        filename: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Awaitable[ExportArtifact]:
        """Export a whole presentation.

        Args:
            presentation: The deck to export.
            fmt: "pdf", "images", "html" or "pptx".
            filename: Overrides ``<title>.<ext>``.
            cancel_event: Stops the export before the next slide once set.

        Returns:
            Awaitable resolving to the export artifact.

        Raises:
            ExportError: For an unknown format (immediately) or a failed export
                (when awaited).
        """
        writer = self.writer_for(fmt)
        logger.info(f"Exporting '{presentation.settings.title or presentation.id}' as {writer.target_name}")
        return writer.export(presentation, filename, cancel_event)

    def export_pdf(self, presentation: Presentation, filename: Optional[str] = None) -> Awaitable[ExportArtifact]:
        return self.export(presentation, "pdf", filename)

    def export_images(self, presentation: Presentation, filename: Optional[str] = None) -> Awaitable[ExportArtifact]:
        return self.export(presentation, "images", filename)

    def export_html(self, presentation: Presentation, filename: Optional[str] = None) -> Awaitable[ExportArtifact]:
        return self.export(presentation, "html", filename)

    def export_pptx(self, presentation: Presentation, filename: Optional[str] = None) -> Awaitable[ExportArtifact]:
        return self.export(presentation, "pptx", filename)

    def export_current_slide(
        self,
        slide: Slide,
        settings: PresentationSettings,
        fmt: str,
        filename: Optional[str] = None,
    ) -> Awaitable[ExportArtifact]:
        """Export a single slide as a one-slide presentation."""
        return self.export(Presentation.with_slides([slide], settings), fmt, filename)

    def export_selected_slides(
        self,
        slides: Sequence[Slide],
        settings: PresentationSettings,
        fmt: str,
        filename: Optional[str] = None,
    ) -> Awaitable[ExportArtifact]:
        """Export ``slides``, in the given order, as their own presentation."""
        return self.export(Presentation.with_slides(list(slides), settings), fmt, filename)

    def save(self, artifact: ExportArtifact, directory: Optional[str | Path] = None) -> list[Path]:
        """Write an artifact's files to disk.

        Args:
            artifact: Result of an export call.
            directory: Target directory. Defaults to ``ExportSettings.output_dir``.

        Returns:
            Paths written, in file order.
        """
        target = Path(directory) if directory is not None else self.settings.output_dir
        paths = artifact.save(target)
        logger.info(f"Saved {len(paths)} file(s) to {target}")
        return paths
