"""Raster image export: one PNG per slide."""

import asyncio
import logging
from pathlib import PurePath
from typing import Awaitable, Optional

from deckexport.dsl.schema import Presentation
from deckexport.errors import ExportError, ExportReport
from deckexport.writers.base import ExportArtifact, ExportFile, RasterDocumentWriter

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_STEM = "slide"


class ImageSetWriter(RasterDocumentWriter):
    """Emits ``slide-<n>.png`` per slide (``<stem>-<n>.png`` with an explicit filename).

    Numbering follows the slide's position in the deck, so a skipped slide
    leaves a gap rather than renumbering the rest. There is no notes channel.
    """

    target_name = "images"
    extension = "png"
    media_type = "image/png"

    def export(
        self,
        presentation: Presentation,
        filename: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Awaitable[ExportArtifact]:
        stem = (PurePath(filename).stem if filename else "") or DEFAULT_IMAGE_STEM
        snapshot = presentation.snapshot()
        return self._run(snapshot, filename, cancel_event, stem=stem)

    async def _export(
        self,
        presentation: Presentation,
        filename: str,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
        stem: str = DEFAULT_IMAGE_STEM,
    ) -> ExportArtifact:
        files = []
        async for captured in self.capture_slides(presentation, report, cancel_event):
            files.append(ExportFile(f"{stem}-{captured.index + 1}.png", captured.png))

        if not files:
            raise ExportError("Failed to export images: no slide could be captured", target=self.target_name)

        logger.debug(f"Captured {len(files)} of {len(presentation.slides)} slides")
        return ExportArtifact(
            filename=filename,
            media_type=self.media_type,
            files=files,
            report=report,
            slide_count=len(files),
        )
