"""Listing coordinator: the single owner of a listing's mutable state.

The view layer reads the observable properties and calls the intent
methods; it never writes to the filter state or the selection directly.
Every fetching intent mutates the filter state, bumps the request id and
dispatches exactly one fetch. Only the completion carrying the latest
request id is applied, so a slow response can never overwrite a newer one.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from adminlist.application.services.authorization import ListingCapabilities
from adminlist.application.services.data_source import ListingDataSource
from adminlist.application.use_cases.initialize_listing import initialize_listing
from adminlist.config import ListingConfig
from adminlist.domain.models import FilterState, ListingSnapshot, RecordId, StatusBucket
from adminlist.errors.handler import ErrorHandler, ErrorSeverity
from adminlist.events.bus import EventBus
from adminlist.events.listing_events import (
    BulkActionCompletedEvent,
    ListingReloadedEvent,
    RecordsChangedEvent,
)
from adminlist.settings.store import NamespacedPreferences

from .base import BaseViewModel
from .bulk_selection import BulkSelection
from .fetch_dispatch import FetchDispatcher, InlineFetchDispatcher
from .signal import ObservableProperty, Signal


class ListingState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ERROR = "error"


class ListingViewModel(BaseViewModel):
    """Coordinates filter state, selection, preferences and fetches."""

    def __init__(
        self,
        config: ListingConfig,
        data_source: ListingDataSource,
        dispatcher: Optional[FetchDispatcher] = None,
        preferences: Optional[NamespacedPreferences] = None,
        capabilities: Optional[ListingCapabilities] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._data_source = data_source
        self._dispatcher: FetchDispatcher = dispatcher or InlineFetchDispatcher()
        self._preferences = preferences
        self._capabilities = capabilities or ListingCapabilities()
        self._events = event_bus
        self._error_handler = error_handler
        self._logger = logging.getLogger(__name__)

        self._filter = FilterState(status=config.default_status, default_status=config.default_status)
        self._selection = BulkSelection()
        self._request_id = 0
        self._dispatched = 0
        self._initialized = False

        # Observable properties
        self.state = ObservableProperty(ListingState.IDLE)
        self.snapshot = ObservableProperty(ListingSnapshot())
        self.column_visibility = ObservableProperty(config.default_column_visibility())
        self.error: ObservableProperty[Optional[Exception]] = ObservableProperty(None)
        self.bulk_ids = ObservableProperty(())

        # Signals
        self.snapshot_changed = Signal("listing.snapshot_changed")
        self.error_occurred = Signal("listing.error_occurred")
        self.selection_changed = Signal("listing.selection_changed")
        self.fetch_dispatched = Signal("listing.fetch_dispatched")

        self._selection.changed.connect(self._on_selection_changed)

        if event_bus is not None:
            namespace = config.namespace
            self.subscribe_event(event_bus, BulkActionCompletedEvent, self._on_bulk_action_completed, namespace)
            self.subscribe_event(event_bus, RecordsChangedEvent, self._on_records_changed, namespace)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def config(self) -> ListingConfig:
        return self._config

    @property
    def filter_state(self) -> FilterState:
        """A copy; mutate through the intent methods."""
        return self._filter.copy()

    @property
    def capabilities(self) -> ListingCapabilities:
        return self._capabilities

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def fetch_count(self) -> int:
        return self._dispatched

    @property
    def is_loading(self) -> bool:
        return self.state.value is ListingState.FETCHING

    @property
    def has_bulk_ids(self) -> bool:
        return self._selection.size() > 0

    @property
    def can_run_bulk_actions(self) -> bool:
        return self._capabilities.bulk_actions and self.has_bulk_ids

    @property
    def selected_nav(self) -> Optional[StatusBucket]:
        return self.snapshot.value.bucket(self._filter.status)

    def is_selected(self, record_id: RecordId) -> bool:
        return self._selection.has(record_id)

    def selection_size(self) -> int:
        return self._selection.size()

    def is_column_visible(self, key: str) -> bool:
        return bool(self.column_visibility.value.get(key, False))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> bool:
        """Apply persisted preferences; reload once if any were found.

        Returns whether a fetch was dispatched. Calling it again is a no-op.
        """
        if self._initialized:
            return False
        self._initialized = True
        initial = initialize_listing(self._config, self._preferences)
        self._filter = initial.filter_state
        self.column_visibility.value = dict(initial.column_visibility)
        if initial.needs_reload:
            self._dispatch("initialize")
            return True
        return False

    def dispose(self) -> None:
        # Bumping the id turns every in-flight fetch into a stale one
        self._request_id += 1
        self._selection.changed.disconnect(self._on_selection_changed)
        super().dispose()

    # ------------------------------------------------------------------
    # Fetching intents
    # ------------------------------------------------------------------
    def reload(self) -> None:
        self._dispatch("reload")

    def clear_filters_and_reload(self) -> None:
        self._filter.clear()
        self._remember_page()
        self._dispatch("clear_filters")

    def filter(self, predicate: Optional[Mapping[str, Any]] = None, *, preserve_page: bool = False) -> None:
        self._filter.set_filter(predicate, preserve_page=preserve_page)
        self._remember_page()
        self._dispatch("filter")

    def filter_by_status(self, slug: str) -> bool:
        """Switch status tab; returns ``False`` when *slug* is already active."""
        if self._filter.status == slug:
            return False
        self._filter.set_status(slug)
        self._remember_page()
        self._dispatch("filter_status")
        return True

    def change_page(self, page: Any) -> None:
        self._filter.set_page(page)
        self._remember_page()
        self._dispatch("change_page")

    # ------------------------------------------------------------------
    # Selection intents
    # ------------------------------------------------------------------
    def toggle_selection(self, record_id: RecordId) -> bool:
        return self._selection.toggle(record_id)

    def select_all(self, record_ids: Optional[Iterable[RecordId]] = None) -> None:
        """Add *record_ids*, or every record of the current page, to the selection."""
        if record_ids is None:
            record_ids = self.snapshot.value.record_ids()
        self._selection.select_all(record_ids)

    def clear_selection(self) -> None:
        self._selection.clear()

    def complete_bulk_action(self, destructive: bool = False) -> None:
        """Refresh after an externally executed bulk action."""
        if destructive:
            self._selection.clear()
        self._dispatch("bulk_action")

    # ------------------------------------------------------------------
    # Column intents
    # ------------------------------------------------------------------
    def set_column_visible(self, key: str, visible: bool) -> None:
        self.set_column_visibility({key: visible})

    def set_column_visibility(self, changes: Mapping[str, bool]) -> None:
        known = set(self._config.default_column_visibility())
        visibility = dict(self.column_visibility.value)
        for key, visible in changes.items():
            if known and key not in known:
                self._logger.warning("Ignoring visibility change for unknown column %r", key)
                continue
            visibility[key] = bool(visible)
        if self.column_visibility.set(visibility) and self._preferences is not None:
            self._preferences.set_column_visibility(visibility)

    # ------------------------------------------------------------------
    # Fetch plumbing
    # ------------------------------------------------------------------
    def _dispatch(self, reason: str) -> int:
        if self.disposed:
            self._logger.debug("Ignoring %s on disposed listing %s", reason, self._config.namespace)
            return self._request_id
        self._request_id += 1
        request_id = self._request_id
        self._dispatched += 1
        state = self._filter.copy()
        self.state.value = ListingState.FETCHING
        self._logger.debug(
            "Dispatching fetch #%d for %s (%s): page=%d status=%s",
            request_id, self._config.namespace, reason, state.page, state.status,
        )
        self.fetch_dispatched.emit(request_id, state)
        self._dispatcher.dispatch(
            request_id,
            functools.partial(self._data_source.fetch, state),
            self._on_fetch_succeeded,
            self._on_fetch_failed,
        )
        return request_id

    def _on_fetch_succeeded(self, request_id: int, snapshot: ListingSnapshot) -> None:
        if request_id != self._request_id:
            self._logger.debug("Dropping stale fetch #%d (latest #%d)", request_id, self._request_id)
            return
        self.snapshot.value = snapshot
        self.error.value = None
        self.state.value = ListingState.IDLE
        self.snapshot_changed.emit(snapshot)
        if self._events is not None:
            self._events.publish(ListingReloadedEvent(
                namespace=self._config.namespace,
                request_id=request_id,
                total_count=snapshot.total_count,
            ))

    def _on_fetch_failed(self, request_id: int, error: Exception) -> None:
        if request_id != self._request_id:
            self._logger.debug("Dropping stale failure #%d (latest #%d)", request_id, self._request_id)
            return
        # The previous snapshot stays on screen next to the error
        self.error.value = error
        self.state.value = ListingState.ERROR
        self.error_occurred.emit(error)
        if self._error_handler is not None:
            self._error_handler.handle(
                error,
                ErrorSeverity.ERROR,
                context={"namespace": self._config.namespace, "request_id": request_id},
            )
        else:
            self._logger.error(
                "Fetch #%d for %s failed: %s", request_id, self._config.namespace, error,
            )

    def _remember_page(self) -> None:
        if self._preferences is not None:
            self._preferences.set_page_offset(self._filter.page)

    # -- handlers ------------------------------------------------------------

    def _on_selection_changed(self, ids: tuple) -> None:
        self.bulk_ids.value = ids
        self.selection_changed.emit(ids)

    def _on_bulk_action_completed(self, event: BulkActionCompletedEvent) -> None:
        self.complete_bulk_action(event.destructive)

    def _on_records_changed(self, event: RecordsChangedEvent) -> None:
        self.reload()
