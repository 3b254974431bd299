from .bus import Event, EventBus, Subscription
from .listing_events import (
    BulkActionCompletedEvent,
    ListingReloadedEvent,
    PreferenceChangedEvent,
    RecordsChangedEvent,
)

__all__ = [
    "BulkActionCompletedEvent",
    "Event",
    "EventBus",
    "ListingReloadedEvent",
    "PreferenceChangedEvent",
    "RecordsChangedEvent",
    "Subscription",
]
