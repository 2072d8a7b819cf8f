"""
Request classification.
"""

from .models import HandlingStrategy, ShareAction, ShareRequest

STREAM_MIME_PREFIXES = ("image/", "video/")
OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain"


def classify(request: ShareRequest) -> HandlingStrategy:
    """Pick a handling strategy from the declared action and MIME type."""
    mime_type = request.mime_type
    if not mime_type:
        return HandlingStrategy.UNSUPPORTED

    if request.action is ShareAction.SEND:
        if mime_type.startswith(STREAM_MIME_PREFIXES) or mime_type == OCTET_STREAM:
            return HandlingStrategy.SINGLE_STREAM
        if mime_type == TEXT_PLAIN:
            return HandlingStrategy.TEXT
    elif request.action is ShareAction.SEND_MULTIPLE:
        if mime_type.startswith("image/"):
            return HandlingStrategy.MULTI_IMAGE

    return HandlingStrategy.UNSUPPORTED
