"""Paginated PDF export: one oversampled slide capture per landscape page."""

import asyncio
import io
import logging
from typing import Optional

from reportlab.lib import pagesizes
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from deckexport.dsl.schema import Presentation
from deckexport.engine.units import fit_page, mm_to_pt
from deckexport.errors import ExportError, ExportReport
from deckexport.writers.base import CapturedSlide, ExportArtifact, ExportFile, RasterDocumentWriter

logger = logging.getLogger(__name__)


def page_size(name: str) -> tuple[float, float]:
    """Landscape page size in points for a standard format name ("A4", "LETTER")."""
    size = getattr(pagesizes, name.strip().upper(), None)
    if not isinstance(size, tuple):
        logger.warning(f"Unknown page size '{name}', using A4")
        size = pagesizes.A4
    return pagesizes.landscape(size)


class PdfWriter(RasterDocumentWriter):
    """Places each slide capture on its own page."""

    target_name = "pdf"
    extension = "pdf"
    media_type = "application/pdf"

    async def _export(
        self,
        presentation: Presentation,
        filename: str,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
    ) -> ExportArtifact:
        buffer = io.BytesIO()
        page_width, page_height = page_size(self.settings.pdf_page_size)
        pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height))

        settings = presentation.settings
        pdf.setTitle(settings.title or self.settings.default_title)
        pdf.setAuthor(settings.author or self.settings.default_author)
        pdf.setSubject(self.settings.subject)
        pdf.setCreator(self.settings.company)

        pages = 0
        async for captured in self.capture_slides(presentation, report, cancel_event):
            self._draw_page(pdf, captured, page_width, page_height)
            pages += 1

        if pages == 0:
            raise ExportError("Failed to export pdf: no slide could be captured", target=self.target_name)

        pdf.save()
        return ExportArtifact(
            filename=filename,
            media_type=self.media_type,
            files=[ExportFile(filename, buffer.getvalue())],
            report=report,
            slide_count=pages,
        )

    def _draw_page(
        self,
        pdf: canvas.Canvas,
        captured: CapturedSlide,
        page_width: float,
        page_height: float,
    ) -> None:
        """Draw one capture centred inside the page margin and close the page."""
        margin = mm_to_pt(self.settings.pdf_margin_mm)
        rect = fit_page(captured.width, captured.height, page_width, page_height, margin)

        # The rectangle is centred, so its top offset equals its bottom offset
        pdf.drawImage(
            ImageReader(io.BytesIO(captured.png)),
            rect.x,
            rect.y,
            width=rect.width,
            height=rect.height,
            preserveAspectRatio=False,
            mask="auto",
        )

        key = f"slide-{captured.index + 1}"
        pdf.bookmarkPage(key)
        pdf.addOutlineEntry(captured.slide.title or f"Slide {captured.index + 1}", key, level=0)

        notes = captured.slide.notes.strip()
        if notes and self.settings.pdf_embed_notes:
            pdf.textAnnotation(
                notes,
                Rect=(0, page_height - margin, margin, page_height),
                relative=0,
            )

        pdf.showPage()
