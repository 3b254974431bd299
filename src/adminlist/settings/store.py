"""Durable key-value store for per-listing preferences."""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

from ..config import APP_DIR_NAME, COLUMNS_VISIBLE_KEY, PAGE_OFFSET_KEY, PREFERENCES_FILE_NAME
from ..errors import MalformedPersistedState, PreferenceStoreError
from ..events.bus import EventBus
from ..events.listing_events import PreferenceChangedEvent
from .schema import (
    decode_column_visibility,
    decode_page_offset,
    empty_preferences,
    encode_column_visibility,
    encode_page_offset,
    validate_preferences,
)

LOGGER = logging.getLogger(__name__)


def default_preferences_path() -> Path:
    """Return the default preference file location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / APP_DIR_NAME / PREFERENCES_FILE_NAME
        return Path.home() / "AppData" / "Roaming" / APP_DIR_NAME / PREFERENCES_FILE_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME / PREFERENCES_FILE_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_DIR_NAME / PREFERENCES_FILE_NAME
    return Path.home() / ".config" / APP_DIR_NAME / PREFERENCES_FILE_NAME


class PreferenceStore:
    """String key-value pairs persisted to a JSON file.

    Reads are served from memory. Writes update memory immediately and are
    flushed to disk on a single background worker so that callers never wait
    on the filesystem. A store created without a path never touches disk.

    Preferences are an optimisation: a missing, unreadable or corrupted file
    behaves like an empty one.
    """

    def __init__(self, path: Optional[Path] = None, event_bus: Optional[EventBus] = None) -> None:
        self._path = path
        self._events = event_bus
        self._data: dict[str, Any] = empty_preferences()
        self._loaded = False
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: list[Future] = []

    @property
    def path(self) -> Optional[Path]:
        return self._path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Read the preference file; any failure leaves the store empty."""

        data = empty_preferences()
        if self._path is not None and self._path.exists():
            try:
                payload = json.loads(self._path.read_text(encoding="utf-8"))
                data = validate_preferences(payload)
            except (OSError, ValueError) as exc:
                LOGGER.warning("Preference file %s is unreadable, ignoring it: %s", self._path, exc)
            except MalformedPersistedState as exc:
                LOGGER.warning("Preference file %s is malformed, ignoring it: %s", self._path, exc)
        with self._lock:
            self._data = data
            self._loaded = True

    def get(self, key: str) -> Optional[str]:
        """Return the stored value for *key*, or ``None`` when absent."""

        self._ensure_loaded()
        with self._lock:
            value = self._data["values"].get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key* and schedule a write to disk."""

        self._ensure_loaded()
        value = str(value)
        with self._lock:
            if self._data["values"].get(key) == value:
                return
            self._data["values"][key] = value
            snapshot = deepcopy(self._data)
        self._schedule_write(snapshot)
        if self._events is not None:
            self._events.publish(PreferenceChangedEvent(key=key, value=value))

    def namespace(self, name: str) -> "NamespacedPreferences":
        return NamespacedPreferences(self, name)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every scheduled write has reached the disk."""

        with self._lock:
            pending, self._pending = self._pending, []
        for future in pending:
            future.result(timeout=timeout)

    def close(self) -> None:
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _schedule_write(self, snapshot: dict[str, Any]) -> None:
        if self._path is None:
            return
        with self._lock:
            if self._executor is None:
                # One worker keeps writes in submission order
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="preferences")
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(self._executor.submit(self._write_safely, snapshot))

    def _write_safely(self, snapshot: dict[str, Any]) -> None:
        try:
            self._write(snapshot)
        except PreferenceStoreError as exc:
            LOGGER.error("Failed to persist preferences: %s", exc)

    def _write(self, snapshot: dict[str, Any]) -> None:
        path = self._path
        if path is None:
            raise PreferenceStoreError("memory-only store has no file to write")
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(snapshot, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise PreferenceStoreError(f"{path}: {exc}") from exc


class NamespacedPreferences:
    """View of a :class:`PreferenceStore` scoped to one listing.

    Keys are stored as ``"{namespace}_{key}"``.
    """

    def __init__(self, store: PreferenceStore, namespace: str) -> None:
        self._store = store
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    def full_key(self, key: str) -> str:
        return f"{self._namespace}_{key}"

    def get(self, key: str) -> Optional[str]:
        return self._store.get(self.full_key(key))

    def set(self, key: str, value: str) -> None:
        self._store.set(self.full_key(key), value)

    # -- typed accessors -----------------------------------------------------

    def page_offset(self) -> Optional[int]:
        raw = self.get(PAGE_OFFSET_KEY)
        if raw is None:
            return None
        try:
            return decode_page_offset(raw)
        except MalformedPersistedState as exc:
            LOGGER.warning("Ignoring persisted page offset for %s: %s", self._namespace, exc)
            return None

    def set_page_offset(self, page: int) -> None:
        self.set(PAGE_OFFSET_KEY, encode_page_offset(page))

    def column_visibility(self) -> Optional[dict[str, bool]]:
        raw = self.get(COLUMNS_VISIBLE_KEY)
        if raw is None:
            return None
        try:
            return decode_column_visibility(raw)
        except MalformedPersistedState as exc:
            LOGGER.warning("Ignoring persisted column visibility for %s: %s", self._namespace, exc)
            return None

    def set_column_visibility(self, visibility: dict[str, bool]) -> None:
        self.set(COLUMNS_VISIBLE_KEY, encode_column_visibility(visibility))


__all__ = ["NamespacedPreferences", "PreferenceStore", "default_preferences_path"]
