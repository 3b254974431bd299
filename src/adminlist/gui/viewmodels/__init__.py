from .base import BaseViewModel
from .bulk_selection import BulkSelection
from .fetch_dispatch import FetchDispatcher, InlineFetchDispatcher
from .listing_viewmodel import ListingState, ListingViewModel
from .signal import ObservableProperty, Signal

__all__ = [
    "BaseViewModel",
    "BulkSelection",
    "FetchDispatcher",
    "InlineFetchDispatcher",
    "ListingState",
    "ListingViewModel",
    "ObservableProperty",
    "Signal",
]
