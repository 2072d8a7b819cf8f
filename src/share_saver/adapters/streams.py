"""
Byte-stream providers.

A provider turns a payload handle into a readable binary stream. Returning
None from ``open`` means the source is unavailable.
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Protocol, Tuple
from urllib.parse import unquote, urlparse

from ..core.config import get_logger

logger = get_logger("streams")


class StreamProvider(Protocol):
    def open(self, handle: str) -> Optional[BinaryIO]: ...

    def display_name(self, handle: str) -> Optional[str]: ...


class LocalStreamProvider:
    """Opens plain paths and ``file://`` URIs on the local filesystem."""

    def open(self, handle: str) -> Optional[BinaryIO]:
        path = self._to_path(handle)
        if path is None or not path.is_file():
            logger.debug("No readable file for %s", handle)
            return None

        try:
            return path.open("rb")
        except OSError as e:
            logger.error("Unable to open %s: %s", path, e)
            return None

    def display_name(self, handle: str) -> Optional[str]:
        path = self._to_path(handle)
        return path.name if path is not None and path.name else None

    def _to_path(self, handle: str) -> Optional[Path]:
        if not handle:
            return None

        parsed = urlparse(handle)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        if parsed.scheme and len(parsed.scheme) > 1:
            # Some other URI scheme this provider cannot read
            return None
        return Path(handle)


class UploadStreamProvider:
    """
    Serves payloads that were uploaded into memory.

    Handles are the keys passed to ``add``; each keeps the uploader's
    filename as its display name.
    """

    def __init__(self):
        self._uploads: Dict[str, Tuple[bytes, Optional[str]]] = {}

    def add(self, content: bytes, filename: Optional[str] = None) -> str:
        handle = f"upload:{len(self._uploads)}"
        self._uploads[handle] = (content, filename)
        return handle

    def open(self, handle: str) -> Optional[BinaryIO]:
        upload = self._uploads.get(handle)
        if upload is None:
            return None
        return BytesIO(upload[0])

    def display_name(self, handle: str) -> Optional[str]:
        upload = self._uploads.get(handle)
        return upload[1] if upload else None

    def __len__(self) -> int:
        return len(self._uploads)
