"""
Exceptions raised while handling a share request.

None of these cross the dispatcher boundary: they are logged and collapsed
to ``Outcome.FAILURE``.
"""

from typing import Dict, Any, Optional


class ShareSaverError(Exception):
    """Base exception for share handling errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceUnavailableError(ShareSaverError):
    """Raised when a payload stream cannot be opened."""

    pass


class IoFailureError(ShareSaverError):
    """Raised when reading or writing fails mid-operation."""

    pass


class NetworkProbeError(ShareSaverError):
    """Raised when the Content-Type lookup for a URL fails."""

    pass


class NoDestinationSelectedError(ShareSaverError):
    """Raised when a download is enqueued without a root location."""

    pass


class LocationError(ShareSaverError):
    """Raised when a save location cannot be selected."""

    pass
