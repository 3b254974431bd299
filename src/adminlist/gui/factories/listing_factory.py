"""Wire a listing viewmodel together from its collaborators."""

from __future__ import annotations

import logging
from typing import Optional

from adminlist.application.services.authorization import CapabilityChecker, deny_all
from adminlist.application.services.data_source import ListingDataSource
from adminlist.application.users import user_capabilities, users_listing_config
from adminlist.domain.repositories import IRecordProvider
from adminlist.errors.handler import ErrorHandler
from adminlist.events.bus import EventBus
from adminlist.gui.viewmodels.fetch_dispatch import FetchDispatcher
from adminlist.gui.viewmodels.listing_viewmodel import ListingViewModel
from adminlist.settings.store import PreferenceStore


def create_users_listing(
    provider: IRecordProvider,
    can: CapabilityChecker = deny_all,
    *,
    preferences: Optional[PreferenceStore] = None,
    event_bus: Optional[EventBus] = None,
    dispatcher: Optional[FetchDispatcher] = None,
    images_enabled: bool = False,
    page_size: Optional[int] = None,
) -> ListingViewModel:
    """Build the user listing; call ``initialize()`` on the result to restore preferences."""
    config_kwargs = {"images_enabled": images_enabled}
    if page_size is not None:
        config_kwargs["page_size"] = page_size
    config = users_listing_config(can, **config_kwargs)
    bus = event_bus or EventBus()
    return ListingViewModel(
        config=config,
        data_source=ListingDataSource(provider, config),
        dispatcher=dispatcher,
        preferences=preferences.namespace(config.namespace) if preferences is not None else None,
        capabilities=user_capabilities(can),
        event_bus=bus,
        error_handler=ErrorHandler(logging.getLogger("adminlist.listing"), bus),
    )
