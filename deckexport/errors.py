"""Exceptions and the per-export warning report."""

from dataclasses import dataclass, field
from typing import Optional


class ExportError(Exception):
    """An export could not produce its artifact.

    This is the only error type the public writer entry points raise. The
    underlying library error, if any, is chained as ``__cause__``.
    """

    def __init__(self, message: str, target: Optional[str] = None):
        super().__init__(message)
        self.target = target


class ExportCancelled(ExportError):
    """The caller cancelled an in-flight export between slides."""


class ResourceError(Exception):
    """An element's resource (image, video) could not be resolved.

    Always contained by the element renderers; never reaches callers.
    """


@dataclass
class ExportWarning:
    """A recoverable problem met while exporting."""

    message: str
    slide_index: Optional[int] = None
    element_id: Optional[str] = None

    def __str__(self) -> str:
        where = []
        if self.slide_index is not None:
            where.append(f"slide {self.slide_index + 1}")
        if self.element_id:
            where.append(f"element {self.element_id}")
        prefix = f"[{', '.join(where)}] " if where else ""
        return f"{prefix}{self.message}"


@dataclass
class ExportReport:
    """Collects recoverable failures for one export call."""

    warnings: list[ExportWarning] = field(default_factory=list)
    skipped_slides: list[int] = field(default_factory=list)

    def warn(
        self,
        message: str,
        slide_index: Optional[int] = None,
        element_id: Optional[str] = None,
    ) -> ExportWarning:
        warning = ExportWarning(message, slide_index, element_id)
        self.warnings.append(warning)
        return warning

    @property
    def ok(self) -> bool:
        """True when nothing was skipped or substituted."""
        return not self.warnings and not self.skipped_slides
