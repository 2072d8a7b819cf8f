"""
Adapters for the external collaborators a share is saved through.
"""

from .downloads import Downloader, DownloadRequest, HttpxDownloadQueue
from .streams import LocalStreamProvider, StreamProvider, UploadStreamProvider

__all__ = [
    "Downloader",
    "DownloadRequest",
    "HttpxDownloadQueue",
    "LocalStreamProvider",
    "StreamProvider",
    "UploadStreamProvider",
]
