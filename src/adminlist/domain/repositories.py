from abc import ABC, abstractmethod

from .models import RecordPage
from .models.query import ListingQuery


class IRecordProvider(ABC):
    """Query side of the record store backing a listing."""

    @abstractmethod
    def query(self, query: ListingQuery) -> RecordPage:
        """Return one page of records matching *query* and the total match count."""
        pass

    @abstractmethod
    def count_by_status(self, slug: str) -> int:
        """Count every record in status bucket *slug*, ignoring other filters."""
        pass
