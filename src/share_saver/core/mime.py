"""
MIME type / file extension registry.

Backed by a private ``mimetypes.MimeTypes`` instance so lookups do not depend
on the host's mime.types files.
"""

import mimetypes
import re
from typing import Dict, Optional
from urllib.parse import unquote, urlparse


# Preferred extensions where the stdlib table lists several candidates.
# A value of None means "never append an extension for this type".
PREFERRED_EXTENSIONS: Dict[str, Optional[str]] = {
    "application/octet-stream": None,
    "image/jpeg": "jpg",
    "image/tiff": "tiff",
    "text/plain": "txt",
    "video/mpeg": "mpeg",
    "video/quicktime": "mov",
}

_URL_EXTENSION_PATTERN = re.compile(r"^[A-Za-z0-9_.\-()%]+$")


def normalize_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """Drop parameters and case from a MIME type ("Image/PNG; q=1" -> "image/png")."""
    if not mime_type:
        return None

    media_type = mime_type.split(";", 1)[0].strip().lower()
    return media_type or None


class MimeRegistry:
    """Maps MIME types to extensions and back."""

    def __init__(self, overrides: Optional[Dict[str, Optional[str]]] = None):
        self._mimetypes = mimetypes.MimeTypes()
        self._overrides = dict(PREFERRED_EXTENSIONS)
        if overrides:
            self._overrides.update(overrides)

    def extension_for_mime(self, mime_type: Optional[str]) -> Optional[str]:
        """Return the extension (without dot) for a MIME type, if one is known."""
        media_type = normalize_mime_type(mime_type)
        if not media_type:
            return None

        if media_type in self._overrides:
            return self._overrides[media_type]

        extension = self._mimetypes.guess_extension(media_type, strict=False)
        return extension.lstrip(".") if extension else None

    def mime_for_extension(self, extension: Optional[str]) -> Optional[str]:
        if not extension:
            return None

        extension = "." + extension.lstrip(".").lower()
        return self._mimetypes.types_map[True].get(
            extension
        ) or self._mimetypes.types_map[False].get(extension)

    def has_known_extension(self, filename: str) -> bool:
        """Check whether a filename already ends in a registered extension."""
        if "." not in filename:
            return False

        extension = filename.rsplit(".", 1)[1]
        return self.mime_for_extension(extension) is not None

    def mime_for_url(self, url: str) -> Optional[str]:
        """Guess a MIME type from the extension of a URL's last path segment."""
        extension = self.extension_from_url(url)
        return self.mime_for_extension(extension) if extension else None

    @staticmethod
    def extension_from_url(url: str) -> Optional[str]:
        if not url:
            return None

        path = urlparse(url).path
        segment = unquote(path.rsplit("/", 1)[-1])
        if "." not in segment or not _URL_EXTENSION_PATTERN.match(segment):
            return None

        extension = segment.rsplit(".", 1)[1]
        return extension or None
