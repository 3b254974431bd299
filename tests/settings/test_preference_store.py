from __future__ import annotations

import json
from pathlib import Path

import pytest

from adminlist.events.bus import EventBus
from adminlist.errors import PreferenceStoreError
from adminlist.events.listing_events import PreferenceChangedEvent
from adminlist.settings.schema import empty_preferences
from adminlist.settings.store import PreferenceStore, default_preferences_path


def test_roundtrip_through_disk(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    store = PreferenceStore(path)
    store.set("users_page-offset", "3")
    store.flush()

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["values"]["users_page-offset"] == "3"

    reloaded = PreferenceStore(path)
    assert reloaded.get("users_page-offset") == "3"
    store.close()


def test_missing_key_is_absent(tmp_path: Path) -> None:
    store = PreferenceStore(tmp_path / "prefs.json")
    assert store.get("nothing") is None


def test_memory_store_never_touches_disk(tmp_path: Path) -> None:
    store = PreferenceStore()
    store.set("k", "v")
    store.flush()
    assert store.get("k") == "v"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "content",
    ["{not json", "[]", json.dumps({"schema": "other", "values": {}}), json.dumps({"schema": "adminlist/preferences@1", "values": {"k": 3}})],
)
def test_corrupted_file_behaves_as_empty(tmp_path: Path, content: str) -> None:
    path = tmp_path / "prefs.json"
    path.write_text(content, encoding="utf-8")

    store = PreferenceStore(path)

    assert store.get("k") is None


def test_namespaces_do_not_collide(tmp_path: Path) -> None:
    store = PreferenceStore(tmp_path / "prefs.json")
    users = store.namespace("users")
    pages = store.namespace("pages")

    users.set_page_offset(4)
    pages.set_page_offset(2)

    assert users.page_offset() == 4
    assert pages.page_offset() == 2
    assert store.get("users_page-offset") == "4"
    store.close()


def test_malformed_page_offset_is_absent() -> None:
    store = PreferenceStore()
    store.set("users_page-offset", "three")
    store.set("pages_page-offset", "0")

    assert store.namespace("users").page_offset() is None
    assert store.namespace("pages").page_offset() is None


def test_column_visibility_roundtrip() -> None:
    prefs = PreferenceStore().namespace("users")

    prefs.set_column_visibility({"email": False, "name": True})

    assert prefs.column_visibility() == {"email": False, "name": True}


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"email": "yes"}'])
def test_malformed_column_visibility_is_absent(raw: str) -> None:
    store = PreferenceStore()
    store.set("users_columns-visible", raw)

    assert store.namespace("users").column_visibility() is None


def test_set_publishes_change_event() -> None:
    bus = EventBus()
    received = []
    bus.subscribe(PreferenceChangedEvent, received.append)
    store = PreferenceStore(event_bus=bus)

    store.set("users_page-offset", "2")
    store.set("users_page-offset", "2")

    assert [(e.key, e.value) for e in received] == [("users_page-offset", "2")]


def test_write_failure_is_logged_not_raised(tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = PreferenceStore(blocker / "prefs.json")

    store.set("k", "v")
    store.flush()

    assert store.get("k") == "v"
    assert "Failed to persist preferences" in caplog.text
    store.close()


def test_default_path_honours_xdg(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("adminlist.settings.store.os.name", "posix")
    monkeypatch.setattr("adminlist.settings.store.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert default_preferences_path() == tmp_path / "adminlist" / "listing-preferences.json"


def test_memory_store_refuses_direct_write() -> None:
    store = PreferenceStore()

    with pytest.raises(PreferenceStoreError):
        store._write(empty_preferences())
