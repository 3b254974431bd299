from .core import (
    ColumnSpec,
    ListingSnapshot,
    RecordId,
    RecordPage,
    StatusBucket,
    UserRecord,
    UserRole,
    record_id,
)
from .query import FilterState, ListingQuery, SortOrder

__all__ = [
    "ColumnSpec",
    "FilterState",
    "ListingQuery",
    "ListingSnapshot",
    "RecordId",
    "RecordPage",
    "SortOrder",
    "StatusBucket",
    "UserRecord",
    "UserRole",
    "record_id",
]
