from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from adminlist.errors import AuthorizationDenied

CapabilityChecker = Callable[[str], bool]


def deny_all(capability: str) -> bool:
    return False


def require(can: CapabilityChecker, capability: str) -> None:
    """Raise :class:`AuthorizationDenied` unless *capability* is granted."""
    if not can(capability):
        raise AuthorizationDenied(capability)


@dataclass(frozen=True)
class ListingCapabilities:
    """Which listing controls are exposed to the current viewer.

    A ``False`` flag hides or disables the control; nothing raises.
    """

    create: bool = False
    publish: bool = False
    delete: bool = False
    restore: bool = False
    edit: bool = False

    @property
    def bulk_actions(self) -> bool:
        return self.publish or self.delete or self.restore or self.edit

    @classmethod
    def from_checker(cls, can: CapabilityChecker, **capability_names: str) -> "ListingCapabilities":
        """Build flags by asking *can* for each capability name.

        ``capability_names`` maps a flag to the capability that grants it,
        e.g. ``ListingCapabilities.from_checker(can, delete="manage-users")``.
        """
        flags = {flag: bool(can(name)) for flag, name in capability_names.items()}
        return cls(**flags)
