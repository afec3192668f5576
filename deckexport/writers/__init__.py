"""Document writers - one container format per export target."""

from deckexport.writers.base import (
    CapturedSlide,
    DocumentWriter,
    ExportArtifact,
    ExportFile,
    RasterDocumentWriter,
    default_filename,
)
from deckexport.writers.html_writer import HtmlWriter
from deckexport.writers.image_writer import ImageSetWriter
from deckexport.writers.pdf_writer import PdfWriter
from deckexport.writers.pptx_writer import PptxWriter

__all__ = [
    "CapturedSlide",
    "DocumentWriter",
    "ExportArtifact",
    "ExportFile",
    "HtmlWriter",
    "ImageSetWriter",
    "PdfWriter",
    "PptxWriter",
    "RasterDocumentWriter",
    "default_filename",
]
