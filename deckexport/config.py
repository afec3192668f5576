"""
config.py — Environment configuration for the exporters.

Uses pydantic-settings for type-safe environment variable handling.
Every variable is prefixed with ``DECKEXPORT_`` (e.g. ``DECKEXPORT_OVERSAMPLE=3``).
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseSettings):
    """Export pipeline settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DECKEXPORT_",
        env_file=".env",
        extra="ignore",
    )

    # Delivery
    output_dir: Path = Path("./exports")

    # Raster capture
    oversample: int = Field(default=2, ge=1, le=8)

    # Paginated document
    pdf_page_size: str = "A4"
    pdf_margin_mm: float = Field(default=10.0, ge=0.0)
    pdf_embed_notes: bool = True

    # Web slideshow
    reveal_version: str = "5.0.4"
    reveal_cdn: str = "https://cdnjs.cloudflare.com/ajax/libs/reveal.js"

    # Office document metadata
    company: str = "zapp - Slideshows Fast"
    subject: str = "Presentation created with zapp"
    default_author: str = "zapp"
    default_title: str = "Untitled Presentation"

    # Image resources
    fetch_remote_images: bool = True
    image_fetch_timeout: float = 10.0

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> ExportSettings:
    """Get cached settings instance."""
    return ExportSettings()


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stream handler to the ``deckexport`` logger namespace.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Log level name or number. Defaults to ``ExportSettings.log_level``.

    Returns:
        The package logger.
    """
    logger = logging.getLogger("deckexport")
    if level is None:
        level = get_settings().log_level
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_deckexport", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        handler._deckexport = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
