"""Tests for the listing error hierarchy."""

from adminlist.errors import (
    ApplicationError,
    AuthorizationDenied,
    DomainError,
    InfrastructureError,
    InvalidFilterInput,
    ListingError,
    MalformedPersistedState,
    PreferenceStoreError,
    TransportFailure,
)


def test_layers_are_listing_errors():
    for layer in (DomainError, InfrastructureError, ApplicationError):
        assert issubclass(layer, ListingError)
        assert isinstance(layer("x"), ListingError)


def test_invalid_filter_input_is_domain_error():
    assert issubclass(InvalidFilterInput, DomainError)


def test_persistence_and_transport_are_infrastructure_errors():
    assert issubclass(TransportFailure, InfrastructureError)
    assert issubclass(MalformedPersistedState, InfrastructureError)
    assert issubclass(PreferenceStoreError, InfrastructureError)


def test_authorization_denied_names_capability():
    err = AuthorizationDenied("manage-users")

    assert isinstance(err, ApplicationError)
    assert err.capability == "manage-users"
    assert str(err) == "capability 'manage-users' is not granted"


def test_error_message():
    err = TransportFailure("users: connection refused")
    assert str(err) == "users: connection refused"
