"""
Data models for share requests, outcomes and per-dispatch diagnostics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import uuid


class ShareAction(str, Enum):
    """Declared action of an inbound share."""

    SEND = "SEND"
    SEND_MULTIPLE = "SEND_MULTIPLE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ShareAction":
        """Map a raw action string to a ShareAction.

        Accepts the bare names as well as the Android intent spelling
        (``android.intent.action.SEND``). Anything else is ``OTHER``.
        """
        if not value:
            return cls.OTHER

        name = value.strip().rsplit(".", 1)[-1].upper()
        try:
            return cls(name)
        except ValueError:
            return cls.OTHER


class Outcome(str, Enum):
    """Terminal result of a save.

    ``PENDING`` means the work was handed to an external subsystem and the
    final result is not observable from here.
    """

    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"

    @classmethod
    def from_bool(cls, value: bool) -> "Outcome":
        return cls.SUCCESS if value else cls.FAILURE


class HandlingStrategy(str, Enum):
    SINGLE_STREAM = "single_stream"
    TEXT = "text"
    MULTI_IMAGE = "multi_image"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PayloadRef:
    """
    Borrowed handle to a byte-readable resource.

    Attributes:
        handle: URI, path or upload key understood by a stream provider
        display_name: Optional name declared by the sender
    """

    handle: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class ShareRequest:
    """
    One inbound share, immutable for the lifetime of a dispatch.

    Attributes:
        action: Declared share action
        mime_type: Declared MIME type, may be missing
        payloads: Stream handles (one for SEND, N for SEND_MULTIPLE)
        text: Optional shared text
        subject: Optional subject line, preferred as the filename source

    Example:
        >>> request = ShareRequest(
        ...     action=ShareAction.SEND,
        ...     mime_type="image/png",
        ...     payloads=(PayloadRef("file:///tmp/cat.png"),),
        ... )
    """

    action: ShareAction
    mime_type: Optional[str] = None
    payloads: Tuple[PayloadRef, ...] = ()
    text: Optional[str] = None
    subject: Optional[str] = None


@dataclass(frozen=True)
class ProbeResult:
    is_url: bool
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class ResolvedFilename:
    """Sanitized filename split into its capped base and appended extension."""

    base: str
    extension: Optional[str] = None

    def __str__(self) -> str:
        if self.extension:
            return f"{self.base}.{self.extension}"
        return self.base


@dataclass
class DiagnosticCollector:
    """Ordered key/value notes gathered while one request is dispatched."""

    notes: List[Tuple[str, str]] = field(default_factory=list)

    def add(self, key: str, value: str) -> None:
        self.notes.append((key, value))

    def as_dict(self) -> Dict[str, str]:
        return {key: value for key, value in self.notes}

    def __len__(self) -> int:
        return len(self.notes)


@dataclass
class DispatchResult:
    """
    What a dispatch hands back to its caller.

    Attributes:
        outcome: Success, pending or failure
        strategy: Strategy chosen by the classifier
        filenames: Resolved destination filenames, in payload order
        diagnostics: Context for building a "not supported" report
        request_id: Unique identifier for this dispatch
    """

    outcome: Outcome
    strategy: HandlingStrategy
    filenames: List[str] = field(default_factory=list)
    diagnostics: Dict[str, str] = field(default_factory=dict)
    request_id: str = field(default_factory=lambda: f"share_{uuid.uuid4()}")

    @property
    def supported(self) -> bool:
        return self.strategy is not HandlingStrategy.UNSUPPORTED
