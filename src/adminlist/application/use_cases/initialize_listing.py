import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from adminlist.config import ListingConfig
from adminlist.domain.models import FilterState
from adminlist.settings.store import NamespacedPreferences

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitialListingState:
    filter_state: FilterState
    column_visibility: Dict[str, bool] = field(default_factory=dict)
    restored_page: bool = False
    restored_columns: bool = False

    @property
    def needs_reload(self) -> bool:
        return self.restored_page or self.restored_columns


def initialize_listing(
    config: ListingConfig,
    preferences: Optional[NamespacedPreferences] = None,
) -> InitialListingState:
    """Seed the filter state and column visibility of a fresh listing.

    Persisted values that cannot be parsed are ignored; the listing then
    starts from the column defaults and page 1.
    """
    state = FilterState(status=config.default_status, default_status=config.default_status)
    visibility = config.default_column_visibility()
    if preferences is None:
        return InitialListingState(filter_state=state, column_visibility=visibility)

    page = preferences.page_offset()
    if page is not None:
        state.set_page(page)

    stored = preferences.column_visibility()
    if stored is not None:
        known = set(visibility)
        for key, visible in stored.items():
            if known and key not in known:
                LOGGER.debug("Dropping persisted visibility for unknown column %r", key)
                continue
            visibility[key] = visible

    LOGGER.info(
        "Initialised listing %s: page=%d restored_page=%s restored_columns=%s",
        config.namespace, state.page, page is not None, stored is not None,
    )
    return InitialListingState(
        filter_state=state,
        column_visibility=visibility,
        restored_page=page is not None,
        restored_columns=stored is not None,
    )
