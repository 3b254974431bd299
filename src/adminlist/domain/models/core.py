from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
from typing import Any, Hashable, List, Optional, Sequence, Tuple

RecordId = Hashable


class UserRole(str, Enum):
    VIEWONLY = "View only"
    PUBLISHER = "Publisher"
    ADMIN = "Admin"


@dataclass(frozen=True)
class ColumnSpec:
    """One column of the listing table."""

    key: str
    title: str
    field: Optional[str] = None
    sortable: bool = False
    sort_key: Optional[str] = None
    visible: bool = True
    thumb: bool = False

    @property
    def order_field(self) -> str:
        return self.sort_key or self.field or self.key


@dataclass
class UserRecord:
    id: int
    name: str
    email: str
    role: UserRole = UserRole.VIEWONLY
    published: bool = True
    deleted: bool = False
    image_url: Optional[str] = None

    @property
    def status(self) -> str:
        if self.deleted:
            return "trash"
        return "published" if self.published else "draft"

    @property
    def role_value(self) -> str:
        return self.role.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.name,
            "role_value": self.role_value,
            "published": self.published,
            "deleted": self.deleted,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class StatusBucket:
    slug: str
    label: str
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.label, "slug": self.slug, "number": self.count}


@dataclass
class RecordPage:
    """What a record provider returns for one query."""

    records: List[Any] = field(default_factory=list)
    total_count: int = 0


def _record_to_dict(record: Any) -> Any:
    if hasattr(record, "to_dict"):
        return record.to_dict()
    if is_dataclass(record):
        return asdict(record)
    return record


def record_id(record: Any) -> RecordId:
    if isinstance(record, dict):
        return record["id"]
    return record.id


@dataclass(frozen=True)
class ListingSnapshot:
    """Immutable result of one fetch; replaced wholesale, never patched."""

    records: Tuple[Any, ...] = ()
    buckets: Tuple[StatusBucket, ...] = ()
    total_count: int = 0

    @classmethod
    def build(
        cls,
        records: Sequence[Any],
        buckets: Sequence[StatusBucket],
        total_count: int,
    ) -> "ListingSnapshot":
        return cls(records=tuple(records), buckets=tuple(buckets), total_count=max(0, int(total_count)))

    def bucket(self, slug: str) -> Optional[StatusBucket]:
        for bucket in self.buckets:
            if bucket.slug == slug:
                return bucket
        return None

    def record_ids(self) -> list[RecordId]:
        return [record_id(record) for record in self.records]

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [_record_to_dict(record) for record in self.records],
            "buckets": [bucket.to_dict() for bucket in self.buckets],
            "totalCount": self.total_count,
        }
