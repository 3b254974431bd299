"""Tests for ListingDataSource: FilterState to provider translation."""

from unittest.mock import Mock

import pytest

from adminlist.application.services.data_source import ListingDataSource
from adminlist.application.users import users_listing_config
from adminlist.config import ListingConfig
from adminlist.domain.models import FilterState, RecordPage, SortOrder
from adminlist.errors import TransportFailure
from adminlist.infrastructure.repositories import InMemoryUserRepository


def _manager(capability):
    return True


def _make_source(users, can=_manager, page_size=20):
    repo = InMemoryUserRepository(users)
    config = users_listing_config(can, page_size=page_size)
    return ListingDataSource(repo, config), repo


class TestFetch:
    def test_returns_page_and_total(self, sample_users):
        source, _ = _make_source(sample_users)

        snapshot = source.fetch(FilterState())

        assert len(snapshot.records) == 20
        assert snapshot.total_count == 40
        assert snapshot.records[0].name == "User 01"

    def test_bucket_counts_ignore_active_status(self, sample_users):
        source, _ = _make_source(sample_users)

        published = source.fetch(FilterState(status="published"))
        draft = source.fetch(FilterState(status="draft"))

        expected = [("published", "Active", 40), ("draft", "Disabled", 12), ("trash", "Trash", 5)]
        assert [(b.slug, b.label, b.count) for b in published.buckets] == expected
        assert [(b.slug, b.label, b.count) for b in draft.buckets] == expected

    def test_trash_bucket_requires_restore(self, sample_users):
        source, _ = _make_source(sample_users, can=lambda capability: False)

        snapshot = source.fetch(FilterState())

        assert [b.slug for b in snapshot.buckets] == ["published", "draft"]

    def test_does_not_mutate_filter_state(self, sample_users):
        source, _ = _make_source(sample_users)
        state = FilterState(search="User", page=2, extra={"role": "ADMIN"})
        before = state.copy()

        source.fetch(state)

        assert state == before

    def test_query_built_from_state(self):
        provider = Mock()
        provider.query.return_value = RecordPage(records=[], total_count=0)
        provider.count_by_status.return_value = 0
        config = ListingConfig(namespace="users", page_size=10, order=(("name", "asc"),))
        source = ListingDataSource(provider, config)

        source.fetch(FilterState(search="ann", status="draft", page=3, extra={"role": "ADMIN"}))

        query = provider.query.call_args.args[0]
        assert query.search == "ann"
        assert query.status == "draft"
        assert query.filters == {"role": "ADMIN"}
        assert (query.offset, query.limit) == (20, 10)
        assert query.order == (("name", SortOrder.ASC),)
        provider.query.assert_called_once()
        assert [c.args[0] for c in provider.count_by_status.call_args_list] == ["published", "draft"]

    @pytest.mark.parametrize("error", [ConnectionError("refused"), TimeoutError("slow"), OSError("down")])
    def test_transport_errors_are_wrapped(self, error):
        provider = Mock()
        provider.query.side_effect = error
        source = ListingDataSource(provider, ListingConfig(namespace="users"))

        with pytest.raises(TransportFailure) as info:
            source.fetch(FilterState())

        assert info.value.__cause__ is error

    def test_other_errors_propagate(self):
        provider = Mock()
        provider.query.side_effect = KeyError("boom")
        source = ListingDataSource(provider, ListingConfig(namespace="users"))

        with pytest.raises(KeyError):
            source.fetch(FilterState())


def test_snapshot_serializes_for_transport(sample_users):
    source, _ = _make_source(sample_users, page_size=2)

    payload = source.fetch(FilterState()).to_dict()

    assert set(payload) == {"records", "buckets", "totalCount"}
    assert payload["totalCount"] == 40
    assert payload["records"][0]["email"] == "user01@example.com"
    assert payload["buckets"][0] == {"name": "Active", "slug": "published", "number": 40}
