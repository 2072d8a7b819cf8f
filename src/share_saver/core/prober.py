"""
Content probing for shared text.

Decides whether a piece of text is a URL and, if so, what kind of content it
points at: first from the extension of its path, then from the
``Content-Type`` header the server answers with.
"""

from typing import Optional
from urllib.parse import urlparse

import httpx

from .config import get_logger
from .exceptions import NetworkProbeError
from .mime import MimeRegistry, normalize_mime_type
from .models import DiagnosticCollector, ProbeResult

logger = get_logger("prober")

URL_SCHEMES = ("http", "https", "ftp")
PLAIN_TEXT = "text/plain"


def parse_url(text: Optional[str]) -> Optional[str]:
    """Return the text as a URL if it parses as one, else None."""
    if not text or not text.strip():
        return None

    candidate = text.strip()
    if any(ch.isspace() for ch in candidate):
        return None

    try:
        parsed = urlparse(candidate)
        if parsed.scheme.lower() not in URL_SCHEMES or not parsed.netloc:
            return None
    except ValueError:
        # e.g. "http://[oops", an unterminated IPv6 host
        return None

    return candidate


class ContentProber:
    """Resolves the content type behind shared text."""

    def __init__(
        self,
        registry: Optional[MimeRegistry] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        proxy: Optional[str] = None,
    ):
        self.registry = registry or MimeRegistry()
        self.timeout = timeout
        self._transport = transport
        self._proxy = proxy

    async def probe(
        self, text: Optional[str], diagnostics: Optional[DiagnosticCollector] = None
    ) -> ProbeResult:
        url = parse_url(text)
        if url is None:
            logger.debug("Text without URL")
            return ProbeResult(is_url=False, mime_type=PLAIN_TEXT)

        logger.debug("Text with URL: %s", url)
        content_type = self.registry.mime_for_url(url)
        if content_type is None:
            content_type = await self.fetch_content_type(url)

        if content_type:
            logger.debug("ContentType: %s", content_type)
            if diagnostics is not None:
                diagnostics.add("URL Content-Type", content_type)

        return ProbeResult(is_url=True, mime_type=normalize_mime_type(content_type))

    async def fetch_content_type(self, url: str) -> Optional[str]:
        """Ask the server for the URL's Content-Type header."""
        try:
            async with self._create_client() as client:
                response = await client.head(url)
                return response.headers.get("content-type")
        except httpx.HTTPError as e:
            logger.warning("Content-Type lookup failed for %s: %s", url, e)
            raise NetworkProbeError(
                f"Failed to probe URL: {str(e)}", {"url": url}
            ) from e

    def _create_client(self) -> httpx.AsyncClient:
        kwargs = {
            "timeout": httpx.Timeout(self.timeout),
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        elif self._proxy:
            kwargs["proxy"] = self._proxy
        return httpx.AsyncClient(**kwargs)
