"""The CMS user listing: columns, status tabs and capability rules."""

from __future__ import annotations

from typing import Any, Hashable

from adminlist.application.services.authorization import CapabilityChecker, ListingCapabilities
from adminlist.config import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_STATUS_SLUG,
    DRAFT_STATUS_SLUG,
    ListingConfig,
)
from adminlist.domain.models import ColumnSpec

USERS_NAMESPACE = "users"
MANAGE_USERS = "manage-users"

ROLE_FILTER = "role"

USER_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec(key="name", title="Name", field="name"),
    ColumnSpec(key="email", title="Email", field="email", sortable=True),
    ColumnSpec(key="role_value", title="Role", field="role_value", sortable=True, sort_key="role"),
)

IMAGE_COLUMN = ColumnSpec(key="image", title="Image", thumb=True)


def user_columns(images_enabled: bool = False) -> tuple[ColumnSpec, ...]:
    if images_enabled:
        return (IMAGE_COLUMN,) + USER_COLUMNS
    return USER_COLUMNS


def users_listing_config(
    can: CapabilityChecker,
    *,
    images_enabled: bool = False,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ListingConfig:
    """The trash tab only exists for viewers allowed to restore users."""
    return ListingConfig(
        namespace=USERS_NAMESPACE,
        columns=user_columns(images_enabled),
        default_status=DEFAULT_STATUS_SLUG,
        page_size=page_size,
        bucket_labels={DEFAULT_STATUS_SLUG: "Active", DRAFT_STATUS_SLUG: "Disabled"},
        restore_enabled=bool(can(MANAGE_USERS)),
        trash_label="Trash",
        order=(("name", "asc"),),
    )


def user_capabilities(can: CapabilityChecker) -> ListingCapabilities:
    return ListingCapabilities.from_checker(
        can,
        create=MANAGE_USERS,
        publish=MANAGE_USERS,
        delete=MANAGE_USERS,
        restore=MANAGE_USERS,
        edit=MANAGE_USERS,
    )


def user_can_edit(can: CapabilityChecker, viewer_id: Hashable, record: Any) -> bool:
    """Managers edit anyone; everybody else edits only themselves."""
    return bool(can(MANAGE_USERS)) or viewer_id == record.id
