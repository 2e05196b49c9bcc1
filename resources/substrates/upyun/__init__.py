"""UpYun storage driver resource exports."""

from resources.substrates.upyun.client import UpyunRestClient, create_upyun_client
from resources.substrates.upyun.component import (
    DRIVER_NAME,
    RESOURCE_COMPONENT_ID,
    build_driver,
    register_upyun_driver,
)
from resources.substrates.upyun.config import (
    UpyunDriverSettings,
    resolve_upyun_settings,
    settings_from_parameters,
)
from resources.substrates.upyun.consistency import ConsistencyPoller, ConvergencePolicy
from resources.substrates.upyun.substrate import (
    ObjectInfo,
    ObjectNotFoundError,
    UpyunBackendError,
    UpyunObjectClient,
)
from resources.substrates.upyun.upyun_driver import UpyunStorageDriver
from resources.substrates.upyun.writer import UpyunFileWriter, WriterState

__all__ = [
    "DRIVER_NAME",
    "RESOURCE_COMPONENT_ID",
    "ConsistencyPoller",
    "ConvergencePolicy",
    "ObjectInfo",
    "ObjectNotFoundError",
    "UpyunBackendError",
    "UpyunDriverSettings",
    "UpyunFileWriter",
    "UpyunObjectClient",
    "UpyunRestClient",
    "UpyunStorageDriver",
    "WriterState",
    "build_driver",
    "create_upyun_client",
    "register_upyun_driver",
    "resolve_upyun_settings",
    "settings_from_parameters",
]
