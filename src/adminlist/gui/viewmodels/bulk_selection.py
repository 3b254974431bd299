"""Record selection that outlives pagination and filtering."""

from __future__ import annotations

from typing import Any, Iterable

from adminlist.domain.models import RecordId

from .signal import Signal


def _sort_key(record_id: RecordId) -> tuple[str, Any]:
    # Mixed id types still sort deterministically
    return (type(record_id).__name__, record_id)


class BulkSelection:
    """Set of selected record ids.

    Only :meth:`clear` shrinks the set wholesale; changing page or filter
    never does, so a user can select across pages before acting.
    ``changed`` is emitted with the sorted ids after every effective change.
    """

    def __init__(self) -> None:
        self._ids: set[RecordId] = set()
        self.changed = Signal("selection.changed")

    def toggle(self, record_id: RecordId) -> bool:
        """Flip membership of *record_id*; return whether it is now selected."""
        if record_id in self._ids:
            self._ids.discard(record_id)
            selected = False
        else:
            self._ids.add(record_id)
            selected = True
        self.changed.emit(self.ids())
        return selected

    def select_all(self, record_ids: Iterable[RecordId]) -> None:
        """Add *record_ids* to the selection (union, not replacement)."""
        before = len(self._ids)
        self._ids.update(record_ids)
        if len(self._ids) != before:
            self.changed.emit(self.ids())

    def clear(self) -> None:
        if self._ids:
            self._ids.clear()
            self.changed.emit(())

    def has(self, record_id: RecordId) -> bool:
        return record_id in self._ids

    def size(self) -> int:
        return len(self._ids)

    def ids(self) -> tuple[RecordId, ...]:
        return tuple(sorted(self._ids, key=_sort_key))

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids
