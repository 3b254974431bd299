"""Default configuration values and the listing configuration object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Mapping

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .domain.models.core import ColumnSpec

# Preference keys inside a listing namespace. The store persists them as
# ``"{namespace}_{key}"``.
PAGE_OFFSET_KEY: Final[str] = "page-offset"
COLUMNS_VISIBLE_KEY: Final[str] = "columns-visible"

DEFAULT_PAGE_SIZE: Final[int] = 20
DEFAULT_STATUS_SLUG: Final[str] = "published"
DRAFT_STATUS_SLUG: Final[str] = "draft"
TRASH_STATUS_SLUG: Final[str] = "trash"

DEFAULT_ORDER: Final[tuple[tuple[str, str], ...]] = (("name", "asc"),)

PREFERENCES_FILE_NAME: Final[str] = "listing-preferences.json"
APP_DIR_NAME: Final[str] = "adminlist"


@dataclass(frozen=True)
class ListingConfig:
    """Everything a listing needs to know, built once at initialisation.

    ``namespace`` keys persisted preferences, ``columns`` supplies default
    column visibility, ``bucket_labels`` fixes the order and labels of the
    status tabs and ``restore_enabled`` adds the trash bucket.
    """

    namespace: str
    columns: tuple[ColumnSpec, ...] = ()
    default_status: str = DEFAULT_STATUS_SLUG
    page_size: int = DEFAULT_PAGE_SIZE
    bucket_labels: Mapping[str, str] = field(
        default_factory=lambda: {DEFAULT_STATUS_SLUG: "Published", DRAFT_STATUS_SLUG: "Draft"}
    )
    restore_enabled: bool = False
    trash_label: str = "Trash"
    order: tuple[tuple[str, str], ...] = DEFAULT_ORDER

    def bucket_slugs(self) -> tuple[str, ...]:
        slugs = tuple(self.bucket_labels)
        if self.restore_enabled and TRASH_STATUS_SLUG not in slugs:
            slugs += (TRASH_STATUS_SLUG,)
        return slugs

    def bucket_label(self, slug: str) -> str:
        if slug == TRASH_STATUS_SLUG and slug not in self.bucket_labels:
            return self.trash_label
        return self.bucket_labels.get(slug, slug)

    def default_column_visibility(self) -> dict[str, bool]:
        return {column.key: column.visible for column in self.columns}
