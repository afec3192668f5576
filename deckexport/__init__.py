"""deckexport - export slide decks to PDF, reveal.js HTML, PPTX and PNG."""

from deckexport.config import ExportSettings, configure_logging, get_settings
from deckexport.dsl.schema import (
    Presentation,
    PresentationSettings,
    Slide,
    SlideBackground,
    SlideContent,
)
from deckexport.errors import ExportCancelled, ExportError, ExportReport, ExportWarning
from deckexport.service import ExportService
from deckexport.writers import ExportArtifact, HtmlWriter, ImageSetWriter, PdfWriter, PptxWriter

__version__ = "0.1.0"

__all__ = [
    "ExportArtifact",
    "ExportCancelled",
    "ExportError",
    "ExportReport",
    "ExportService",
    "ExportSettings",
    "ExportWarning",
    "HtmlWriter",
    "ImageSetWriter",
    "PdfWriter",
    "PptxWriter",
    "Presentation",
    "PresentationSettings",
    "Slide",
    "SlideBackground",
    "SlideContent",
    "configure_logging",
    "get_settings",
]
