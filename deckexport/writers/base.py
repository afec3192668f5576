"""Common behaviour of the document writers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Optional

from deckexport.config import ExportSettings, get_settings
from deckexport.dsl.schema import Presentation, PresentationSettings, Slide
from deckexport.engine.assembler import SlideAssembler
from deckexport.engine.resources import ResourceResolver
from deckexport.engine.units import TargetSpec, raster_target
from deckexport.errors import ExportCancelled, ExportError, ExportReport
from deckexport.renderer.raster_renderer import RasterRenderer, RasterSurface

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[TargetSpec], RasterSurface]


@dataclass
class ExportFile:
    """One file of an export artifact."""

    name: str
    data: bytes


@dataclass
class ExportArtifact:
    """Result of one export call."""

    filename: str
    media_type: str
    files: list[ExportFile]
    report: ExportReport = field(default_factory=ExportReport)
    slide_count: int = 0

    @property
    def data(self) -> bytes:
        """Bytes of a single-file artifact."""
        if len(self.files) != 1:
            raise ValueError(f"artifact has {len(self.files)} files; use .files")
        return self.files[0].data

    def save(self, directory: str | Path) -> list[Path]:
        """Write every file into ``directory``.

        Returns:
            Paths written, in file order.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        paths = []
        for export_file in self.files:
            path = directory / export_file.name
            path.write_bytes(export_file.data)
            paths.append(path)
        return paths


def default_filename(settings: PresentationSettings, extension: str) -> str:
    """``<title or 'presentation'>.<ext>``."""
    return f"{settings.title or 'presentation'}.{extension}"


class DocumentWriter(ABC):
    """Owns one target's container format.

    :meth:`export` snapshots the presentation synchronously, at call time, and
    returns an awaitable; later edits to the caller's presentation never reach
    the artifact. Any failure to build or finalize the artifact surfaces as
    :class:`ExportError`.
    """

    target_name: str = ""
    extension: str = ""
    media_type: str = "application/octet-stream"

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        resolver: Optional[ResourceResolver] = None,
    ):
        self.settings = settings or get_settings()
        self.resolver = resolver

    def make_resolver(self) -> ResourceResolver:
        """Resolver for one export call (fresh cache per call)."""
        if self.resolver is not None:
            return self.resolver
        return ResourceResolver(
            fetch_remote=self.settings.fetch_remote_images,
            timeout=self.settings.image_fetch_timeout,
        )

    def export(
        self,
        presentation: Presentation,
        filename: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Awaitable[ExportArtifact]:
        """Export ``presentation``.

        Args:
            presentation: Deck to export; copied before anything else happens.
            filename: Overrides ``<title>.<ext>``.
            cancel_event: When set, the export stops before the next slide.

        Returns:
            Awaitable resolving to the :class:`ExportArtifact`.
        """
        snapshot = presentation.snapshot()
        return self._run(snapshot, filename, cancel_event)

    async def _run(
        self,
        presentation: Presentation,
        filename: Optional[str],
        cancel_event: Optional[asyncio.Event],
        **options,
    ) -> ExportArtifact:
        name = filename or default_filename(presentation.settings, self.extension)
        if not presentation.slides:
            raise ExportError(
                f"Failed to export {self.target_name}: presentation has no slides",
                target=self.target_name,
            )

        report = ExportReport()
        try:
            artifact = await self._export(presentation, name, report, cancel_event, **options)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"{self.target_name} export of '{name}' failed: {e}", exc_info=True)
            raise ExportError(
                f"Failed to export {self.target_name} presentation: {e}",
                target=self.target_name,
            ) from e

        logger.info(
            f"{self.target_name} export complete: {artifact.filename} "
            f"({artifact.slide_count} slides, {len(report.warnings)} warnings)"
        )
        return artifact

    def check_cancelled(self, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"{self.target_name} export cancelled")
            raise ExportCancelled(f"{self.target_name} export cancelled", target=self.target_name)

    @abstractmethod
    async def _export(
        self,
        presentation: Presentation,
        filename: str,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
        **options,
    ) -> ExportArtifact:
        """Build the artifact. Recoverable problems go on ``report``."""


@dataclass
class CapturedSlide:
    index: int
    slide: Slide
    png: bytes
    width: int
    height: int


class RasterDocumentWriter(DocumentWriter):
    """Writers built on off-screen slide captures.

    Slides are captured strictly one after another: each surface is created,
    drawn, captured and closed before the next one exists. Each call gets its
    own surfaces.
    """

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        resolver: Optional[ResourceResolver] = None,
        surface_factory: Optional[SurfaceFactory] = None,
    ):
        super().__init__(settings, resolver)
        self.surface_factory: SurfaceFactory = surface_factory or RasterSurface

    @property
    def capture_target(self) -> TargetSpec:
        return raster_target(self.settings.oversample)

    def capture_slide(
        self,
        slide: Slide,
        settings: PresentationSettings,
        index: int,
        assembler: SlideAssembler,
        resolver: ResourceResolver,
    ) -> CapturedSlide:
        """Draw and capture one slide on a fresh surface, always closing it."""
        surface = self.surface_factory(self.capture_target)
        try:
            renderer = RasterRenderer(surface, resolver)
            assembler.assemble(slide, settings, renderer, index)
            width, height = surface.size
            return CapturedSlide(index, slide, surface.capture(), width, height)
        finally:
            surface.close()

    async def capture_slides(
        self,
        presentation: Presentation,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
    ) -> AsyncIterator[CapturedSlide]:
        """Yield captures in slide order; failed slides are skipped and recorded."""
        assembler = SlideAssembler(report)
        resolver = self.make_resolver()

        for index, slide in enumerate(presentation.slides):
            self.check_cancelled(cancel_event)
            try:
                captured = await asyncio.to_thread(
                    self.capture_slide,
                    slide,
                    presentation.settings,
                    index,
                    assembler,
                    resolver,
                )
            except Exception as e:
                logger.warning(f"Slide {index + 1} capture failed, skipped: {e}", exc_info=True)
                report.skipped_slides.append(index)
                report.warn(f"capture failed: {e}", slide_index=index)
                continue
            yield captured
