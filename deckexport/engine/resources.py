"""Resolve element resource references (images) to bytes."""

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from deckexport.errors import ResourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageResource:
    """A decoded image ready for embedding."""

    data: bytes
    width: int
    height: int
    format: str

    def stream(self) -> io.BytesIO:
        return io.BytesIO(self.data)


class ResourceResolver:
    """Turns an element's ``content`` reference into image bytes.

    Supports ``data:`` URIs, ``file://`` URLs, plain filesystem paths and,
    when enabled, http(s) URLs. Resolved images are cached per resolver, so
    one export fetches a repeated image only once.
    """

    def __init__(
        self,
        fetch_remote: bool = True,
        timeout: float = 10.0,
        base_dir: Path | None = None,
    ):
        self.fetch_remote = fetch_remote
        self.timeout = timeout
        self.base_dir = base_dir
        self._cache: dict[str, ImageResource] = {}

    def resolve_image(self, reference: str) -> ImageResource:
        """Resolve and decode an image reference.

        Raises:
            ResourceError: If the reference cannot be read or is not an image.
        """
        if not reference or not reference.strip():
            raise ResourceError("empty image reference")

        reference = reference.strip()
        if reference in self._cache:
            return self._cache[reference]

        data = self._read(reference)
        try:
            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
                fmt = img.format or "PNG"
        except (UnidentifiedImageError, OSError) as e:
            raise ResourceError(f"not a readable image: {_describe(reference)}") from e

        resource = ImageResource(data=data, width=width, height=height, format=fmt)
        self._cache[reference] = resource
        return resource

    def _read(self, reference: str) -> bytes:
        if reference.startswith("data:"):
            return self._read_data_uri(reference)

        parsed = urlparse(reference)
        if parsed.scheme in ("http", "https"):
            return self._read_remote(reference)
        if parsed.scheme == "file":
            return self._read_file(Path(unquote(parsed.path)))
        if parsed.scheme and len(parsed.scheme) > 1:
            raise ResourceError(f"unsupported scheme '{parsed.scheme}'")
        return self._read_file(Path(reference))

    def _read_data_uri(self, reference: str) -> bytes:
        header, sep, payload = reference.partition(",")
        if not sep:
            raise ResourceError("malformed data URI")
        try:
            if header.endswith(";base64"):
                return base64.b64decode(payload, validate=True)
            return unquote(payload).encode("latin-1")
        except (binascii.Error, ValueError, UnicodeEncodeError) as e:
            raise ResourceError("undecodable data URI") from e

    def _read_file(self, path: Path) -> bytes:
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            return path.read_bytes()
        except OSError as e:
            raise ResourceError(f"cannot read {path}: {e}") from e

    def _read_remote(self, url: str) -> bytes:
        if not self.fetch_remote:
            raise ResourceError(f"remote images disabled: {url}")
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise ResourceError(f"fetch failed for {url}: {e}") from e


def _describe(reference: str) -> str:
    if reference.startswith("data:"):
        return reference.split(",", 1)[0] + ",..."
    return reference
