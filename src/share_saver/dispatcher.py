"""
Share dispatcher.

Entry point for one inbound share: classifies the request, resolves
filenames, saves the payloads and reduces everything to a single
``DispatchResult``.
"""

import asyncio
from typing import List, Optional

from .core.batch import BatchAggregator
from .core.classifier import classify
from .core.config import get_logger
from .core.exceptions import ShareSaverError
from .core.filenames import FilenameResolver, last_path_segment, name_source_for
from .core.mime import MimeRegistry
from .core.models import (
    DiagnosticCollector,
    DispatchResult,
    HandlingStrategy,
    Outcome,
    PayloadRef,
    ShareRequest,
)
from .core.paths import compose
from .core.prober import PLAIN_TEXT, ContentProber
from .core.saver import DEFAULT_CHUNK_SIZE, SaveOrchestrator

REMOTE_SAVE_PREFIXES = ("image/", "video/")


class ShareDispatcher:
    """
    Routes share requests to the matching save operation.

    Examples:
        Check a request is supported, then save it:
        >>> dispatcher = ShareDispatcher(LocalStreamProvider())
        >>> check = await dispatcher.dispatch(request, dry_run=True)
        >>> if check.supported:
        ...     result = await dispatcher.dispatch(request, root="/srv/shares")
    """

    def __init__(
        self,
        provider,
        downloader=None,
        prober: Optional[ContentProber] = None,
        registry: Optional[MimeRegistry] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.registry = registry or MimeRegistry()
        self.provider = provider
        self.resolver = FilenameResolver(self.registry)
        self.prober = prober or ContentProber(self.registry)
        self.saver = SaveOrchestrator(provider, downloader, chunk_size=chunk_size)
        self.logger = get_logger("dispatcher")

    async def dispatch(
        self, request: ShareRequest, root: Optional[str] = None, dry_run: bool = False
    ) -> DispatchResult:
        """
        Handle one share request.

        Args:
            request: The inbound share
            root: Selected root location, None if nothing was chosen yet
            dry_run: Only check routability, perform no save I/O

        Returns:
            DispatchResult with the outcome, chosen strategy, resolved
            filenames and diagnostics for unsupported requests
        """
        self.logger.info("Action: %s", request.action.value)
        self.logger.info("Type: %s", request.mime_type)

        diagnostics = DiagnosticCollector()
        filenames: List[str] = []
        strategy = classify(request)

        if strategy is HandlingStrategy.SINGLE_STREAM:
            outcome = await self._handle_stream(request, root, dry_run, filenames)
        elif strategy is HandlingStrategy.TEXT:
            outcome = await self._handle_text(
                request, root, dry_run, filenames, diagnostics
            )
        elif strategy is HandlingStrategy.MULTI_IMAGE:
            outcome = await self._handle_multiple_images(
                request, root, dry_run, filenames
            )
        else:
            outcome = Outcome.FAILURE

        self.logger.info(
            "%s %s: %s",
            "Checked" if dry_run else "Handled",
            strategy.value,
            outcome.value,
        )
        return DispatchResult(
            outcome=outcome,
            strategy=strategy,
            filenames=filenames,
            diagnostics=build_report(request, diagnostics),
        )

    async def _handle_stream(
        self, request: ShareRequest, root: Optional[str], dry_run: bool, filenames: List[str]
    ) -> Outcome:
        if not request.payloads:
            return Outcome.FAILURE

        ref = request.payloads[0]
        filename = self._filename_for(ref, request.mime_type)
        filenames.append(filename)
        return await self.saver.save_stream(ref, compose(root, filename), dry_run)

    async def _handle_text(
        self,
        request: ShareRequest,
        root: Optional[str],
        dry_run: bool,
        filenames: List[str],
        diagnostics: DiagnosticCollector,
    ) -> Outcome:
        # An attached stream wins over the text itself
        if request.payloads:
            self.logger.debug("Text has stream")
            return await self._handle_stream(request, root, dry_run, filenames)

        text = request.text
        if text is None:
            return Outcome.FAILURE

        try:
            probe = await self.prober.probe(text, diagnostics)
        except ShareSaverError as e:
            self.logger.error("Unable to probe shared text: %s", e.message)
            return Outcome.FAILURE

        if not probe.is_url:
            filename = str(self.resolver.resolve(request.subject or text, PLAIN_TEXT))
            filenames.append(filename)
            return await self.saver.save_text(text, compose(root, filename), dry_run)

        if not probe.mime_type:
            return Outcome.FAILURE

        url = text.strip()
        filename = str(
            self.resolver.resolve(
                request.subject or last_path_segment(url), probe.mime_type
            )
        )
        filenames.append(filename)
        if not probe.mime_type.startswith(REMOTE_SAVE_PREFIXES):
            return Outcome.FAILURE

        return await self.saver.save_url(url, filename, root, dry_run)

    async def _handle_multiple_images(
        self, request: ShareRequest, root: Optional[str], dry_run: bool, filenames: List[str]
    ) -> Outcome:
        if not request.payloads:
            return Outcome.FAILURE

        items = [
            (ref, self._filename_for(ref, request.mime_type)) for ref in request.payloads
        ]
        filenames.extend(filename for _, filename in items)

        aggregator = BatchAggregator(len(items))

        async def save_item(ref: PayloadRef, filename: str) -> None:
            try:
                outcome = await self.saver.save_stream(ref, compose(root, filename), dry_run)
            except Exception:
                # Every item has to report, or the batch never completes
                self.logger.exception("Unexpected error saving %s", filename)
                outcome = Outcome.FAILURE
            aggregator.record(outcome)

        await asyncio.gather(*(save_item(ref, filename) for ref, filename in items))
        return aggregator.result

    def _filename_for(self, ref: PayloadRef, mime_type: Optional[str]) -> str:
        return str(self.resolver.resolve(name_source_for(ref, self.provider), mime_type))


def build_report(request: ShareRequest, diagnostics: DiagnosticCollector) -> dict:
    """Collect the request context and probe notes for a support report."""
    report = {
        "Intent type": request.mime_type or "",
        "Intent action": request.action.value,
    }
    if request.text is not None:
        report["Text"] = request.text
    if request.subject is not None:
        report["Subject"] = request.subject
    report.update(diagnostics.as_dict())
    return report
