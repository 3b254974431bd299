import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt-backed tests run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from adminlist.domain.models import UserRecord, UserRole  # noqa: E402


class DeferredDispatcher:
    """Fetch dispatcher that parks every job until the test resolves it.

    Lets tests deliver completions in any order, like overlapping network
    requests would.
    """

    def __init__(self):
        self.pending = {}
        self.dispatched = []

    def dispatch(self, request_id, job, on_success, on_failure):
        self.dispatched.append(request_id)
        self.pending[request_id] = (job, on_success, on_failure)

    def resolve(self, request_id, snapshot=None):
        job, on_success, _ = self.pending.pop(request_id)
        on_success(request_id, snapshot if snapshot is not None else job())

    def fail(self, request_id, error):
        _, _, on_failure = self.pending.pop(request_id)
        on_failure(request_id, error)

    def resolve_all(self):
        for request_id in sorted(self.pending):
            self.resolve(request_id)


@pytest.fixture
def deferred_dispatcher():
    return DeferredDispatcher()


@pytest.fixture
def sample_users():
    """57 users: 40 active, 12 disabled, 5 trashed."""
    users = []
    for index in range(1, 58):
        if index <= 40:
            published, deleted = True, False
        elif index <= 52:
            published, deleted = False, False
        else:
            published, deleted = True, True
        role = (UserRole.ADMIN, UserRole.PUBLISHER, UserRole.VIEWONLY)[index % 3]
        users.append(UserRecord(
            id=index,
            name=f"User {index:02d}",
            email=f"user{index:02d}@example.com",
            role=role,
            published=published,
            deleted=deleted,
        ))
    return users
