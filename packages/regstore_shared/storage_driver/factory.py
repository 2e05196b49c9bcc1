"""Explicit storage-driver registry populated by the hosting application.

Nothing registers itself on import. The host builds one registry at startup,
calls each driver's registration function, then creates the configured driver
by name from a flat parameter map.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from threading import RLock
from typing import Final

from .base import StorageDriver

DriverFactory = Callable[[Mapping[str, object]], StorageDriver]

_DRIVER_NAME_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_-]{0,62}$")


class DriverRegistrationError(ValueError):
    """Raised when driver registration or lookup is invalid."""


class InvalidDriverParametersError(ValueError):
    """Raised when a driver parameter map is missing required options."""


@dataclass(slots=True)
class StorageDriverRegistry:
    """In-memory name -> factory map for storage drivers."""

    _factories: dict[str, DriverFactory] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def register(self, name: str, factory: DriverFactory) -> None:
        """Register one driver factory under a unique name."""
        validate_driver_name(name)
        with self._lock:
            existing = self._factories.get(name)
            if existing is not None and existing is not factory:
                raise DriverRegistrationError(
                    f"storage driver already registered: {name}"
                )
            self._factories[name] = factory

    def create(self, name: str, parameters: Mapping[str, object]) -> StorageDriver:
        """Construct one driver instance from its registered factory."""
        with self._lock:
            factory = self._factories.get(name)
        if factory is None:
            raise DriverRegistrationError(f"storage driver not registered: {name}")
        return factory(parameters)

    def names(self) -> tuple[str, ...]:
        """Return registered driver names sorted alphabetically."""
        with self._lock:
            return tuple(sorted(self._factories))


def validate_driver_name(value: str) -> None:
    """Validate driver-name format."""
    if not _DRIVER_NAME_RE.fullmatch(value):
        raise DriverRegistrationError(
            f"invalid driver name '{value}'; expected ^[a-z][a-z0-9_-]{{0,62}}$"
        )
