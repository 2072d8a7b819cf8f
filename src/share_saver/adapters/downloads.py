"""
Background download queue for URL shares.

``enqueue`` is fire-and-forget: the caller gets no completion signal, which is
why URL saves report ``Outcome.PENDING``. Downloads run on a small thread pool
and their results are only logged.
"""

import concurrent.futures
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Set

import httpx

from ..core.config import get_logger

logger = get_logger("downloads")


class Downloader(Protocol):
    def enqueue(
        self, url: str, title: str, description: str, destination_dir: str
    ) -> None: ...


@dataclass(frozen=True)
class DownloadRequest:
    url: str
    title: str
    description: str
    destination_dir: str

    @property
    def destination(self) -> Path:
        return Path(self.destination_dir) / self.title


class HttpxDownloadQueue:
    """Downloads URLs into a destination directory in the background."""

    def __init__(
        self,
        max_workers: int = 4,
        chunk_size: int = 8192,
        timeout: Optional[float] = None,
        proxy: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.chunk_size = chunk_size
        self.timeout = timeout
        self._proxy = proxy
        self._transport = transport
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="share-saver-download"
        )
        self._lock = threading.Lock()
        self._futures: Set[concurrent.futures.Future] = set()

    def enqueue(
        self, url: str, title: str, description: str, destination_dir: str
    ) -> None:
        request = DownloadRequest(url, title, description, destination_dir)
        logger.info("Enqueued download: %s", description)

        future = self._executor.submit(self._download, request)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._futures)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every enqueued download has finished."""
        with self._lock:
            futures = list(self._futures)
        concurrent.futures.wait(futures, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _forget(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def _download(self, request: DownloadRequest) -> bool:
        destination = request.destination
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with self._create_client() as client:
                with client.stream("GET", request.url) as response:
                    response.raise_for_status()
                    with open(destination, "wb") as out:
                        for chunk in response.iter_bytes(self.chunk_size):
                            out.write(chunk)
        except (httpx.HTTPError, OSError) as e:
            logger.error("Download of %s failed: %s", request.url, e)
            return False

        logger.info("Downloaded %s to %s", request.url, destination)
        return True

    def _create_client(self) -> httpx.Client:
        kwargs = {
            "timeout": httpx.Timeout(self.timeout),
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        elif self._proxy:
            kwargs["proxy"] = self._proxy
        return httpx.Client(**kwargs)
