"""In-process user store implementing the record provider interface."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from adminlist.config import DEFAULT_STATUS_SLUG, DRAFT_STATUS_SLUG, TRASH_STATUS_SLUG
from adminlist.domain.models import RecordPage, SortOrder, UserRecord
from adminlist.domain.models.query import ListingQuery
from adminlist.domain.repositories import IRecordProvider

_logger = logging.getLogger(__name__)


def _sort_value(record: UserRecord, column: str) -> Any:
    if column == "role":
        return record.role.value.lower()
    value = getattr(record, column, None)
    if isinstance(value, str):
        return value.lower()
    return value


class InMemoryUserRepository(IRecordProvider):
    """Keeps users in a list; safe to query from fetch worker threads."""

    def __init__(self, users: Optional[Iterable[UserRecord]] = None) -> None:
        self._users: List[UserRecord] = list(users or [])
        self._lock = threading.Lock()

    # -- IRecordProvider -------------------------------------------------

    def query(self, query: ListingQuery) -> RecordPage:
        with self._lock:
            matches = [user for user in self._users if self._matches(user, query)]
        for column, order in reversed(query.order):
            matches.sort(key=lambda user: _sort_value(user, column), reverse=order is SortOrder.DESC)
        total = len(matches)
        start = max(query.offset, 0)
        end = start + query.limit if query.limit is not None else None
        # Copies keep later bulk edits out of snapshots already handed out
        return RecordPage(records=[replace(user) for user in matches[start:end]], total_count=total)

    def count_by_status(self, slug: str) -> int:
        with self._lock:
            return sum(1 for user in self._users if user.status == slug)

    # -- mutations used by bulk actions ------------------------------------

    def add(self, user: UserRecord) -> None:
        with self._lock:
            self._users.append(user)

    def get(self, user_id: int) -> Optional[UserRecord]:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user
        return None

    def set_published(self, user_ids: Iterable[int], published: bool) -> int:
        return self._update(user_ids, published=published)

    def trash(self, user_ids: Iterable[int]) -> int:
        return self._update(user_ids, deleted=True)

    def restore(self, user_ids: Iterable[int]) -> int:
        return self._update(user_ids, deleted=False)

    # -- internal ----------------------------------------------------------

    def _update(self, user_ids: Iterable[int], **changes: Any) -> int:
        wanted = set(user_ids)
        touched = 0
        with self._lock:
            for user in self._users:
                if user.id in wanted:
                    for name, value in changes.items():
                        setattr(user, name, value)
                    touched += 1
        _logger.info("Updated %d users with %s", touched, changes)
        return touched

    @staticmethod
    def _matches(user: UserRecord, query: ListingQuery) -> bool:
        if query.status in (DEFAULT_STATUS_SLUG, DRAFT_STATUS_SLUG, TRASH_STATUS_SLUG):
            if user.status != query.status:
                return False
        elif user.deleted:
            return False
        if query.search:
            needle = query.search.lower()
            if needle not in user.name.lower() and needle not in user.email.lower():
                return False
        role = query.filters.get("role")
        if role and role not in (user.role.name, user.role.value):
            return False
        return True
