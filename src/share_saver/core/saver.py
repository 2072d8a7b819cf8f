"""
Save orchestration.

Each save takes a ``dry_run`` flag. A dry run returns ``Outcome.SUCCESS``
before touching the filesystem or the network; it is used to check that a
request is routable before a save location is chosen.
"""

import asyncio
from typing import Optional

from .config import get_logger
from .exceptions import (
    IoFailureError,
    NoDestinationSelectedError,
    ShareSaverError,
    SourceUnavailableError,
)
from .models import Outcome, PayloadRef
from .paths import compose

DEFAULT_CHUNK_SIZE = 8192
DOWNLOAD_DESCRIPTION = "Downloading {url}"


class SaveOrchestrator:
    """Persists payloads as files or hands them to the download queue."""

    def __init__(self, provider, downloader=None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        if downloader is None:
            from ..adapters.downloads import HttpxDownloadQueue

            downloader = HttpxDownloadQueue(chunk_size=chunk_size)

        self.provider = provider
        self.downloader = downloader
        self.chunk_size = chunk_size
        self.logger = get_logger("saver")

    async def save_stream(
        self, ref: PayloadRef, destination: str, dry_run: bool = False
    ) -> Outcome:
        """Copy a payload stream to ``destination``."""
        if dry_run:
            return Outcome.SUCCESS

        self.logger.debug("Saving %s to %s", ref.handle, destination)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self._copy_stream, ref, destination)
        except ShareSaverError as e:
            self.logger.error("Unable to save file: %s", e.message)
            return Outcome.FAILURE

        return Outcome.SUCCESS

    async def save_url(
        self, url: str, filename: str, root: Optional[str], dry_run: bool = False
    ) -> Outcome:
        """Enqueue a download of ``url``; the result is never observed here."""
        if dry_run:
            return Outcome.SUCCESS

        try:
            self._enqueue_download(url, filename, root)
        except ShareSaverError as e:
            self.logger.error("Unable to enqueue download: %s", e.message)
            return Outcome.FAILURE

        return Outcome.PENDING

    async def save_text(self, text: str, destination: str, dry_run: bool = False) -> Outcome:
        """Write ``text`` to ``destination``."""
        if dry_run:
            return Outcome.SUCCESS

        self.logger.debug("Saving text to %s", destination)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self._write_text, text, destination)
        except ShareSaverError as e:
            self.logger.error("Unable to save file: %s", e.message)
            return Outcome.FAILURE

        return Outcome.SUCCESS

    def _copy_stream(self, ref: PayloadRef, destination: str) -> None:
        try:
            source = self.provider.open(ref.handle)
        except OSError as e:
            raise SourceUnavailableError(
                f"Unable to open {ref.handle}: {e}", {"handle": ref.handle}
            ) from e

        if source is None:
            raise SourceUnavailableError(
                f"No stream for {ref.handle}", {"handle": ref.handle}
            )

        with source:
            try:
                with open(destination, "wb") as out:
                    while True:
                        chunk = source.read(self.chunk_size)
                        if not chunk:
                            break
                        out.write(chunk)
            except OSError as e:
                raise IoFailureError(
                    f"Failed writing {destination}: {e}", {"destination": destination}
                ) from e

    def _write_text(self, text: str, destination: str) -> None:
        # Encode before opening so unencodable text leaves no empty file behind
        try:
            data = text.encode("utf-8")
        except UnicodeError as e:
            raise IoFailureError(
                f"Cannot encode text for {destination}: {e}", {"destination": destination}
            ) from e

        try:
            with open(destination, "wb") as out:
                out.write(data)
        except OSError as e:
            raise IoFailureError(
                f"Failed writing {destination}: {e}", {"destination": destination}
            ) from e

    def _enqueue_download(self, url: str, filename: str, root: Optional[str]) -> None:
        if not root:
            raise NoDestinationSelectedError(
                "No save location selected for download", {"url": url}
            )

        self.logger.debug("Saving %s to %s", url, compose(root, filename))
        self.downloader.enqueue(
            url,
            title=filename,
            description=DOWNLOAD_DESCRIPTION.format(url=url),
            destination_dir=root,
        )
