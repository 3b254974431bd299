"""Translate a filter state into record-provider calls.

``ListingDataSource.fetch`` is synchronous and read-only; callers that
need it off the UI thread hand it to a fetch dispatcher.
"""

from __future__ import annotations

import logging

from adminlist.config import ListingConfig
from adminlist.domain.models import FilterState, ListingSnapshot, StatusBucket
from adminlist.domain.models.query import ListingQuery
from adminlist.domain.repositories import IRecordProvider
from adminlist.errors import TransportFailure

LOGGER = logging.getLogger(__name__)


class ListingDataSource:
    """Fetches one page of records plus the count of every status bucket."""

    def __init__(self, provider: IRecordProvider, config: ListingConfig) -> None:
        self._provider = provider
        self._config = config

    @property
    def config(self) -> ListingConfig:
        return self._config

    def build_query(self, state: FilterState) -> ListingQuery:
        return state.to_query(self._config.page_size, self._config.order)

    def fetch(self, state: FilterState) -> ListingSnapshot:
        query = self.build_query(state)
        LOGGER.debug(
            "Fetching %s: status=%s search=%r filters=%s offset=%d",
            self._config.namespace, query.status, query.search, query.filters, query.offset,
        )
        try:
            page = self._provider.query(query)
            # Counts ignore the active status so every tab stays accurate
            buckets = [
                StatusBucket(
                    slug=slug,
                    label=self._config.bucket_label(slug),
                    count=max(0, int(self._provider.count_by_status(slug))),
                )
                for slug in self._config.bucket_slugs()
            ]
        except TransportFailure:
            raise
        except OSError as exc:
            raise TransportFailure(f"{self._config.namespace}: {exc}") from exc
        return ListingSnapshot.build(page.records, buckets, page.total_count)
