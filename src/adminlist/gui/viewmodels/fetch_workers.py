"""Background QRunnable workers that run listing fetches off the UI thread."""

from __future__ import annotations

import itertools
import logging
from typing import Dict, Optional, Tuple

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from .fetch_dispatch import FailureCallback, FetchJob, SuccessCallback

_logger = logging.getLogger(__name__)


class _FetchSignals(QObject):
    # (ticket, request_id, payload)
    succeeded = Signal(int, int, object)
    failed = Signal(int, int, object)


class _FetchWorker(QRunnable):
    def __init__(self, job: FetchJob, ticket: int, request_id: int) -> None:
        super().__init__()
        self._job = job
        self._ticket = ticket
        self._request_id = request_id
        self.signals = _FetchSignals()

    def run(self) -> None:
        _logger.debug("[FETCH-WORKER] Starting fetch #%d (ticket %d)", self._request_id, self._ticket)
        try:
            snapshot = self._job()
        except Exception as exc:
            _logger.warning("[FETCH-WORKER] Fetch #%d failed: %s", self._request_id, exc)
            self.signals.failed.emit(self._ticket, self._request_id, exc)
            return
        _logger.debug(
            "[FETCH-WORKER] Fetch #%d returned %d records",
            self._request_id, len(snapshot.records),
        )
        self.signals.succeeded.emit(self._ticket, self._request_id, snapshot)


class QtFetchDispatcher(QObject):
    """Runs fetches on a ``QThreadPool``.

    Completions are delivered on the thread that owns the dispatcher, so a
    listing living on the UI thread only ever sees serialized callbacks.
    One dispatcher may serve several listings; their request ids can
    overlap, so pending callbacks are keyed by a dispatcher-wide ticket.
    """

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._tickets = itertools.count(1)
        self._callbacks: Dict[int, Tuple[SuccessCallback, FailureCallback]] = {}

    @property
    def in_flight(self) -> int:
        return len(self._callbacks)

    def dispatch(
        self,
        request_id: int,
        job: FetchJob,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        ticket = next(self._tickets)
        self._callbacks[ticket] = (on_success, on_failure)
        worker = _FetchWorker(job, ticket, request_id)
        worker.signals.succeeded.connect(self._on_succeeded)
        worker.signals.failed.connect(self._on_failed)
        self._pool.start(worker)

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    def _on_succeeded(self, ticket: int, request_id: int, snapshot: object) -> None:
        callbacks = self._callbacks.pop(ticket, None)
        if callbacks is not None:
            callbacks[0](request_id, snapshot)

    def _on_failed(self, ticket: int, request_id: int, error: object) -> None:
        callbacks = self._callbacks.pop(ticket, None)
        if callbacks is not None:
            callbacks[1](request_id, error)
