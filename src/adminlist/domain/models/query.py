from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from adminlist.config import DEFAULT_STATUS_SLUG
from adminlist.errors import InvalidFilterInput

LOGGER = logging.getLogger(__name__)

SEARCH_KEY = "search"
STATUS_KEY = "status"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


def parse_page(value: Any) -> int:
    """Strictly parse a page number, raising :class:`InvalidFilterInput`."""
    if isinstance(value, bool):
        raise InvalidFilterInput(f"page must be an integer, got {value!r}")
    try:
        page = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidFilterInput(f"page must be an integer, got {value!r}") from exc
    if page < 1:
        raise InvalidFilterInput(f"page must be >= 1, got {page}")
    return page


def clamp_page(value: Any) -> int:
    """Lenient version of :func:`parse_page`: anything invalid becomes 1."""
    try:
        return parse_page(value)
    except InvalidFilterInput:
        LOGGER.debug("Clamping invalid page %r to 1", value)
        return 1


@dataclass
class ListingQuery:
    """Provider-facing query built from a :class:`FilterState`."""

    search: str = ""
    status: Optional[str] = None
    filters: Dict[str, str] = field(default_factory=dict)
    limit: Optional[int] = None
    offset: int = 0
    order: Tuple[Tuple[str, SortOrder], ...] = ()

    def paginate(self, page: int, page_size: int):
        self.offset = (page - 1) * page_size
        self.limit = page_size
        return self

    def order_by(self, column: str, order: SortOrder = SortOrder.ASC):
        self.order = self.order + ((column, order),)
        return self


@dataclass
class FilterState:
    """Current filter predicate and page of one listing.

    Every mutation is synchronous and total. Changing the predicate or the
    status sends the listing back to page 1 unless ``preserve_page`` is set.
    """

    search: str = ""
    status: str = DEFAULT_STATUS_SLUG
    page: int = 1
    extra: Dict[str, str] = field(default_factory=dict)
    default_status: str = field(default=DEFAULT_STATUS_SLUG, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.page = clamp_page(self.page)
        self.search = self.search or ""
        self.extra = {str(k): str(v) for k, v in (self.extra or {}).items()}

    # -- mutations ---------------------------------------------------------

    def set_filter(self, predicate: Optional[Mapping[str, Any]] = None, *, preserve_page: bool = False) -> None:
        """Replace search and the named filters with *predicate*.

        ``None`` means an empty search. A ``status`` key is ignored; status
        changes go through :meth:`set_status`.
        """
        predicate = dict(predicate or {SEARCH_KEY: ""})
        predicate.pop(STATUS_KEY, None)
        search = predicate.pop(SEARCH_KEY, "")
        self.search = "" if search is None else str(search)
        self.extra = {str(k): str(v) for k, v in predicate.items() if v is not None}
        if not preserve_page:
            self.page = 1

    def set_status(self, slug: str, *, preserve_page: bool = False) -> None:
        self.status = slug
        if not preserve_page:
            self.page = 1

    def set_page(self, page: Any) -> None:
        self.page = clamp_page(page)

    def clear(self) -> None:
        self.search = ""
        self.extra = {}
        self.status = self.default_status
        self.page = 1

    # -- derived -----------------------------------------------------------

    def copy(self) -> "FilterState":
        return FilterState(
            search=self.search,
            status=self.status,
            page=self.page,
            extra=dict(self.extra),
            default_status=self.default_status,
        )

    def to_query(
        self,
        page_size: int,
        order: Tuple[Tuple[str, str], ...] = (),
    ) -> ListingQuery:
        query = ListingQuery(search=self.search, status=self.status, filters=dict(self.extra))
        query.paginate(self.page, page_size)
        for column, direction in order:
            query.order_by(column, SortOrder(direction.lower()))
        return query

    # -- request encoding ----------------------------------------------------

    @classmethod
    def from_request_filter(
        cls,
        raw: Optional[str],
        default_status: str = DEFAULT_STATUS_SLUG,
        page: Any = 1,
    ) -> "FilterState":
        """Decode the JSON ``filter`` request parameter.

        A missing or undecodable parameter yields the default status filter.
        """
        payload: Any = None
        if raw:
            try:
                payload = json.loads(raw)
            except (TypeError, ValueError):
                LOGGER.warning("Ignoring undecodable filter parameter %r", raw)
        if not isinstance(payload, dict):
            payload = {STATUS_KEY: default_status}
        payload = dict(payload)
        status = payload.pop(STATUS_KEY, None) or default_status
        state = cls(status=str(status), default_status=default_status)
        state.set_filter(payload)
        state.set_page(page)
        return state

    def to_request_filter(self) -> str:
        payload: Dict[str, str] = {STATUS_KEY: self.status}
        if self.search:
            payload[SEARCH_KEY] = self.search
        payload.update(self.extra)
        return json.dumps(payload, sort_keys=True)
