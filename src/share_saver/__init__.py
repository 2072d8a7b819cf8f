"""
share-saver

Receive shared files, text and links and save them into a chosen location.
"""

__version__ = "0.1.0"

from .core.models import (  # noqa: E402
    DispatchResult,
    HandlingStrategy,
    Outcome,
    PayloadRef,
    ShareAction,
    ShareRequest,
)
from .dispatcher import ShareDispatcher  # noqa: E402

__all__ = [
    "DispatchResult",
    "HandlingStrategy",
    "Outcome",
    "PayloadRef",
    "ShareAction",
    "ShareDispatcher",
    "ShareRequest",
]
