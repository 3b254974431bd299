"""Custom exception hierarchy for adminlist."""

from __future__ import annotations


class ListingError(Exception):
    """Base class for all custom errors raised by adminlist."""


# --- 3-layer hierarchy ---

class DomainError(ListingError):
    """Base class for domain-level errors."""


class InfrastructureError(ListingError):
    """Base class for infrastructure-level errors."""


class ApplicationError(ListingError):
    """Base class for application-level errors."""


# --- Domain errors ---

class InvalidFilterInput(DomainError):
    """Raised by strict parsers when a filter value is out of range.

    The listing itself clamps such values instead of raising.
    """


# --- Infrastructure errors ---

class TransportFailure(InfrastructureError):
    """Raised when the record provider cannot be reached or times out."""


class MalformedPersistedState(InfrastructureError):
    """Raised when a stored preference value cannot be parsed."""


class PreferenceStoreError(InfrastructureError):
    """Raised when the preference file cannot be written."""


# --- Application errors ---

class AuthorizationDenied(ApplicationError):
    """Raised when a capability check fails for a guarded operation."""

    def __init__(self, capability: str) -> None:
        super().__init__(f"capability '{capability}' is not granted")
        self.capability = capability


__all__ = [
    "ApplicationError",
    "AuthorizationDenied",
    "DomainError",
    "InfrastructureError",
    "InvalidFilterInput",
    "ListingError",
    "MalformedPersistedState",
    "PreferenceStoreError",
    "TransportFailure",
]
