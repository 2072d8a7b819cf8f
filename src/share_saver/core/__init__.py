"""
Core share handling.

Classification, filename resolution, content probing, path composition,
saving and batch aggregation. Only the prober and the saver perform I/O.
"""

from .batch import BatchAggregator, aggregate
from .classifier import classify
from .filenames import FilenameResolver, name_source_for, resolve_filename
from .mime import MimeRegistry, normalize_mime_type
from .models import (
    DiagnosticCollector,
    DispatchResult,
    HandlingStrategy,
    Outcome,
    PayloadRef,
    ProbeResult,
    ResolvedFilename,
    ShareAction,
    ShareRequest,
)
from .paths import add_root, compose, remove_root, select_root
from .prober import ContentProber, parse_url
from .saver import SaveOrchestrator

__all__ = [
    "BatchAggregator",
    "aggregate",
    "classify",
    "FilenameResolver",
    "name_source_for",
    "resolve_filename",
    "MimeRegistry",
    "normalize_mime_type",
    "DiagnosticCollector",
    "DispatchResult",
    "HandlingStrategy",
    "Outcome",
    "PayloadRef",
    "ProbeResult",
    "ResolvedFilename",
    "ShareAction",
    "ShareRequest",
    "add_root",
    "compose",
    "remove_root",
    "select_root",
    "ContentProber",
    "parse_url",
    "SaveOrchestrator",
]
