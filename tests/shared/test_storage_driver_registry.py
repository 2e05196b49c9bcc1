"""Tests for the explicit storage-driver registry."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from packages.regstore_shared.storage_driver import (
    DriverRegistrationError,
    StorageDriver,
    StorageDriverRegistry,
)


class _StubDriver:
    """Bare object standing in for a constructed driver."""

    def __init__(self, parameters: Mapping[str, object]) -> None:
        self.parameters = dict(parameters)

    def name(self) -> str:
        return "stub"


def _factory(parameters: Mapping[str, object]) -> StorageDriver:
    return _StubDriver(parameters)  # type: ignore[return-value]


def test_registry_creates_registered_driver_with_parameters() -> None:
    """create should pass the parameter map to the named factory."""
    registry = StorageDriverRegistry()
    registry.register("stub", _factory)

    driver = registry.create("stub", {"bucket": "b"})

    assert isinstance(driver, _StubDriver)
    assert driver.parameters == {"bucket": "b"}
    assert registry.names() == ("stub",)


def test_registry_starts_empty() -> None:
    """Nothing should be registered until the host registers it."""
    assert StorageDriverRegistry().names() == ()


def test_unknown_driver_is_rejected() -> None:
    """Creating an unregistered driver should fail by name."""
    with pytest.raises(DriverRegistrationError, match="not registered: missing"):
        StorageDriverRegistry().create("missing", {})


def test_duplicate_registration_with_different_factory_is_rejected() -> None:
    """Names are unique; re-registering the same factory is tolerated."""
    registry = StorageDriverRegistry()
    registry.register("stub", _factory)
    registry.register("stub", _factory)

    with pytest.raises(DriverRegistrationError, match="already registered"):
        registry.register("stub", lambda parameters: _factory(parameters))


@pytest.mark.parametrize("name", ["", "Upyun", "1driver", "has space"])
def test_invalid_driver_names_are_rejected(name: str) -> None:
    """Driver names should be lowercase identifiers."""
    with pytest.raises(DriverRegistrationError, match="invalid driver name"):
        StorageDriverRegistry().register(name, _factory)
