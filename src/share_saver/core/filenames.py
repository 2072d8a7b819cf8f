"""
Filename resolution for shared payloads.

Turns a display name or URI into a filename that is safe to create under a
save location: last path component only, cut at the first space, restricted
to ``[-_.A-Za-z0-9]``, capped at 100 characters, with an extension appended
from the MIME type when the name lacks one.
"""

import re
from typing import Optional
from urllib.parse import unquote, urlparse

from .config import get_logger
from .mime import MimeRegistry
from .models import PayloadRef, ResolvedFilename

logger = get_logger("filenames")

FILENAME_PATTERN = re.compile(r"[^-_.A-Za-z0-9]")
FILENAME_LENGTH_LIMIT = 100


class FilenameResolver:
    def __init__(self, registry: Optional[MimeRegistry] = None):
        self.registry = registry or MimeRegistry()

    def resolve(self, name_source: Optional[str], mime_type: Optional[str]) -> ResolvedFilename:
        logger.debug("Converting filename: %s", name_source)

        result = sanitize_name(name_source or "")

        # The cap applies to the base only; an appended extension may exceed it.
        if len(result) > FILENAME_LENGTH_LIMIT:
            result = result[:FILENAME_LENGTH_LIMIT]

        extension = None
        if not self.registry.has_known_extension(result):
            extension = self.registry.extension_for_mime(mime_type)

        resolved = ResolvedFilename(base=result, extension=extension)
        logger.debug("Converted filename: %s", resolved)
        return resolved


def sanitize_name(name: str) -> str:
    """Apply the path, space and character rules to a raw name."""
    result = name.rsplit("/", 1)[-1]
    result = result.split(" ", 1)[0]
    return FILENAME_PATTERN.sub("", result)


def last_path_segment(uri: str) -> Optional[str]:
    """Return the decoded last non-empty path segment of a URI or path."""
    parsed = urlparse(uri)
    path = parsed.path if parsed.scheme else uri
    segments = [segment for segment in path.split("/") if segment]
    return unquote(segments[-1]) if segments else None


def name_source_for(ref: PayloadRef, provider=None) -> Optional[str]:
    """
    Pick the string a payload's filename is derived from.

    Order: the name declared with the payload, then the provider's display
    name for the handle, then the last path segment of the handle.

    Args:
        ref: Payload whose name is needed
        provider: Optional stream provider exposing ``display_name(handle)``

    Returns:
        The name source, or None when the handle has no usable path
    """
    if ref.display_name:
        return ref.display_name

    if provider is not None:
        display_name = provider.display_name(ref.handle)
        if display_name:
            return display_name

    return last_path_segment(ref.handle)


_default_resolver = FilenameResolver()


def resolve_filename(name_source: Optional[str], mime_type: Optional[str]) -> ResolvedFilename:
    """Resolve a filename with the default MIME registry."""
    return _default_resolver.resolve(name_source, mime_type)
