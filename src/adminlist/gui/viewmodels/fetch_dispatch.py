"""How a listing hands a fetch to whoever runs it."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from adminlist.domain.models import ListingSnapshot

_logger = logging.getLogger(__name__)

FetchJob = Callable[[], ListingSnapshot]
SuccessCallback = Callable[[int, ListingSnapshot], None]
FailureCallback = Callable[[int, Exception], None]


class FetchDispatcher(Protocol):
    """Runs *job* and reports back with the request id it was given.

    Completions may arrive in any order; callers discard stale ones.
    Dispatchers never cancel a job.
    """

    def dispatch(
        self,
        request_id: int,
        job: FetchJob,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None: ...


class InlineFetchDispatcher:
    """Runs the job immediately on the calling thread."""

    def dispatch(
        self,
        request_id: int,
        job: FetchJob,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        try:
            snapshot = job()
        except Exception as exc:
            _logger.warning("Fetch #%d failed: %s", request_id, exc)
            on_failure(request_id, exc)
            return
        on_success(request_id, snapshot)
