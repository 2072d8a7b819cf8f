"""
Aggregation of per-item outcomes for multi-payload shares.
"""

import threading
from typing import Callable, Iterable, Optional

from .config import get_logger
from .models import Outcome

logger = get_logger("batch")


class BatchAggregator:
    """
    Folds N item outcomes into one.

    A completion counter gates emission: the aggregate is produced once, after
    every item has reported. Any ``FAILURE`` makes the aggregate a failure;
    ``PENDING`` items leave the running result untouched, so the aggregate is
    always ``SUCCESS`` or ``FAILURE``.

    ``record`` may be called from several threads at once.

    Example:
        >>> aggregator = BatchAggregator(2)
        >>> aggregator.record(Outcome.SUCCESS) is None
        True
        >>> aggregator.record(Outcome.FAILURE).value
        'failure'
    """

    def __init__(
        self, total: int, on_complete: Optional[Callable[[Outcome], None]] = None
    ):
        if total < 1:
            raise ValueError("Batch must contain at least one item")

        self.total = total
        self.on_complete = on_complete
        self._lock = threading.Lock()
        self._counter = 0
        self._complete_success = True
        self._result: Optional[Outcome] = None

    @property
    def completed(self) -> int:
        return self._counter

    @property
    def result(self) -> Optional[Outcome]:
        """The aggregate, or None until every item has reported."""
        return self._result

    def record(self, outcome: Outcome) -> Optional[Outcome]:
        """Record one item outcome; returns the aggregate on the last item."""
        with self._lock:
            if self._result is not None:
                raise RuntimeError("Batch already complete")

            self._counter += 1
            if outcome is Outcome.FAILURE:
                self._complete_success = False

            if self._counter < self.total:
                return None

            self._result = Outcome.from_bool(self._complete_success)
            result = self._result

        logger.info("Batch of %d complete: %s", self.total, result.value)
        if self.on_complete:
            self.on_complete(result)
        return result


def aggregate(outcomes: Iterable[Outcome]) -> Outcome:
    """Aggregate an already-collected sequence of outcomes."""
    outcomes = list(outcomes)
    if not outcomes:
        return Outcome.FAILURE

    aggregator = BatchAggregator(len(outcomes))
    result = None
    for outcome in outcomes:
        result = aggregator.record(outcome)
    return result
