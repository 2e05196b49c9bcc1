"""Registration hooks for the UpYun storage driver.

The host calls ``register_upyun_driver`` on its registry during startup;
importing this module registers nothing.
"""

from __future__ import annotations

from collections.abc import Mapping

from packages.regstore_shared.storage_driver import StorageDriverRegistry
from resources.substrates.upyun.config import RESOURCE_COMPONENT_ID, settings_from_parameters
from resources.substrates.upyun.upyun_driver import DRIVER_NAME, UpyunStorageDriver

__all__ = ["DRIVER_NAME", "RESOURCE_COMPONENT_ID", "build_driver", "register_upyun_driver"]


def build_driver(parameters: Mapping[str, object]) -> UpyunStorageDriver:
    """Build one driver from a flat parameter map."""
    return UpyunStorageDriver(settings=settings_from_parameters(parameters))


def register_upyun_driver(registry: StorageDriverRegistry) -> None:
    """Register the UpYun driver factory under its driver name."""
    registry.register(DRIVER_NAME, build_driver)
