import threading

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for fetch worker tests", exc_type=ImportError)
pytest.importorskip("pytestqt", reason="pytest-qt is required for fetch worker tests", exc_type=ImportError)

from PySide6.QtCore import QThreadPool

from adminlist.application.services.data_source import ListingDataSource
from adminlist.application.users import users_listing_config
from adminlist.domain.models import ListingSnapshot
from adminlist.errors import TransportFailure
from adminlist.gui.viewmodels.fetch_workers import QtFetchDispatcher
from adminlist.gui.viewmodels.listing_viewmodel import ListingState, ListingViewModel
from adminlist.infrastructure.repositories import InMemoryUserRepository


@pytest.fixture
def pool():
    pool = QThreadPool()
    pool.setMaxThreadCount(2)
    yield pool
    pool.waitForDone(2000)


def test_success_is_delivered_on_owner_thread(qtbot, pool):
    dispatcher = QtFetchDispatcher(pool)
    main_thread = threading.get_ident()
    results = []

    def on_success(request_id, snapshot):
        results.append((request_id, snapshot, threading.get_ident()))

    dispatcher.dispatch(7, lambda: ListingSnapshot(total_count=3), on_success, lambda *a: None)

    qtbot.waitUntil(lambda: len(results) == 1, timeout=2000)
    request_id, snapshot, thread = results[0]
    assert request_id == 7
    assert snapshot.total_count == 3
    assert thread == main_thread
    assert dispatcher.in_flight == 0


def test_failure_is_delivered(qtbot, pool):
    dispatcher = QtFetchDispatcher(pool)
    failures = []

    def job():
        raise TransportFailure("unreachable")

    dispatcher.dispatch(1, job, lambda *a: None, lambda rid, err: failures.append((rid, err)))

    qtbot.waitUntil(lambda: len(failures) == 1, timeout=2000)
    assert failures[0][0] == 1
    assert isinstance(failures[0][1], TransportFailure)


def test_slow_first_fetch_does_not_overwrite_second(qtbot, pool, sample_users):
    release_first = threading.Event()
    repo = InMemoryUserRepository(sample_users)
    config = users_listing_config(lambda capability: True)
    data_source = ListingDataSource(repo, config)
    original_fetch = data_source.fetch

    def fetch(state):
        if state.status == "published":
            release_first.wait(2)
        return original_fetch(state)

    data_source.fetch = fetch
    vm = ListingViewModel(config, data_source, dispatcher=QtFetchDispatcher(pool))

    vm.reload()
    vm.filter_by_status("draft")
    qtbot.waitUntil(lambda: vm.state.value is ListingState.IDLE, timeout=2000)
    assert vm.snapshot.value.total_count == 12

    release_first.set()
    pool.waitForDone(2000)
    qtbot.wait(50)

    assert vm.snapshot.value.total_count == 12
    assert vm.filter_state.status == "draft"


def test_listings_sharing_a_dispatcher_both_complete(qtbot, pool, sample_users):
    dispatcher = QtFetchDispatcher(pool)
    repo = InMemoryUserRepository(sample_users)
    listings = []
    for can in (lambda capability: True, lambda capability: False):
        config = users_listing_config(can)
        listings.append(ListingViewModel(config, ListingDataSource(repo, config), dispatcher=dispatcher))
    active, other = listings

    active.reload()
    other.filter_by_status("draft")
    assert active.request_id == other.request_id == 1

    qtbot.waitUntil(
        lambda: all(vm.state.value is ListingState.IDLE for vm in listings),
        timeout=2000,
    )
    assert active.snapshot.value.total_count == 40
    assert other.snapshot.value.total_count == 12
    assert dispatcher.in_flight == 0
