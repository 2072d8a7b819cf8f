from typing import List, Tuple

import httpx
import pytest

from share_saver.adapters.streams import UploadStreamProvider
from share_saver.core.mime import MimeRegistry
from share_saver.core.prober import ContentProber


class RecordingDownloader:
    """Download subsystem stand-in that remembers what was enqueued."""

    def __init__(self):
        self.enqueued: List[Tuple[str, str, str, str]] = []
        self.shut_down = False

    def enqueue(self, url, title, description, destination_dir):
        self.enqueued.append((url, title, description, destination_dir))

    def shutdown(self, wait=True):
        self.shut_down = True


def content_type_transport(content_type=None, status_code=200):
    """MockTransport answering every request with the given Content-Type."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        headers = {"content-type": content_type} if content_type else {}
        return httpx.Response(status_code, headers=headers)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


def failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def registry():
    return MimeRegistry()


@pytest.fixture
def downloader():
    return RecordingDownloader()


@pytest.fixture
def uploads():
    return UploadStreamProvider()


@pytest.fixture
def make_prober(registry):
    def factory(transport):
        return ContentProber(registry, transport=transport)

    return factory


@pytest.fixture
def save_root(tmp_path):
    root = tmp_path / "Pictures"
    root.mkdir()
    return str(root)
