"""Host startup: logging, driver registry, and the configured storage driver."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from packages.regstore_shared.config import (
    RegstoreSettings,
    component_settings_mapping,
    load_settings,
)
from packages.regstore_shared.logging import configure_logging
from packages.regstore_shared.storage_driver import StorageDriver, StorageDriverRegistry
from resources.substrates.upyun.component import register_upyun_driver

logger = logging.getLogger(__name__)

DRIVER_REGISTRATIONS: tuple[Callable[[StorageDriverRegistry], None], ...] = (
    register_upyun_driver,
)


@dataclass(frozen=True, slots=True)
class StorageStartupResult:
    """Everything the host needs after storage startup."""

    settings: RegstoreSettings
    registry: StorageDriverRegistry
    driver: StorageDriver


def build_driver_registry(
    registrations: tuple[Callable[[StorageDriverRegistry], None], ...] = DRIVER_REGISTRATIONS,
) -> StorageDriverRegistry:
    """Create a registry and run every driver registration function."""
    registry = StorageDriverRegistry()
    for register in registrations:
        register(registry)
    return registry


def run_storage_startup(
    *,
    settings: RegstoreSettings | None = None,
    registry_builder: Callable[[], StorageDriverRegistry] = build_driver_registry,
) -> StorageStartupResult:
    """Configure logging, then construct the driver named by ``storage.driver``.

    Driver parameters come from ``components.substrate.<driver>``.
    """
    resolved = settings if settings is not None else load_settings()
    configure_logging(resolved.logging)

    registry = registry_builder()
    driver_name = resolved.storage.driver
    parameters = component_settings_mapping(
        settings=resolved, component_id=f"substrate_{driver_name}"
    )
    driver = registry.create(driver_name, parameters)
    logger.info("Storage driver ready: %s (registered: %s)", driver.name(), ", ".join(registry.names()))
    return StorageStartupResult(settings=resolved, registry=registry, driver=driver)
