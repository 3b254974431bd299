from .authorization import CapabilityChecker, ListingCapabilities, require
from .data_source import ListingDataSource

__all__ = [
    "CapabilityChecker",
    "ListingCapabilities",
    "ListingDataSource",
    "require",
]
