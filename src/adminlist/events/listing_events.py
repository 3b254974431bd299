from dataclasses import dataclass, field
from typing import Optional

from .bus import Event


@dataclass(kw_only=True)
class ListingReloadedEvent(Event):
    namespace: str = ""
    request_id: int = 0
    total_count: int = 0


@dataclass(kw_only=True)
class RecordsChangedEvent(Event):
    """Records of *namespace* were edited outside the listing."""
    namespace: str = ""


@dataclass(kw_only=True)
class BulkActionCompletedEvent(Event):
    namespace: str = ""
    action: str = ""
    record_ids: list = field(default_factory=list)
    destructive: bool = False


@dataclass(kw_only=True)
class PreferenceChangedEvent(Event):
    key: str = ""
    value: Optional[str] = None
