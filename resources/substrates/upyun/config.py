"""Pydantic settings for the UpYun storage driver."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.regstore_shared.config import RegstoreSettings, component_settings_mapping
from packages.regstore_shared.storage_driver import InvalidDriverParametersError
from resources.substrates.upyun.consistency import ConvergencePolicy

logger = logging.getLogger(__name__)

RESOURCE_COMPONENT_ID = "substrate_upyun"
DEFAULT_ENDPOINT = "v0.api.upyun.com"
_REQUIRED_PARAMETERS = ("username", "password", "bucket")


class UpyunDriverSettings(BaseModel):
    """Immutable UpYun driver parameters fixed for the driver lifetime."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    username: str
    password: str = Field(repr=False)
    bucket: str
    endpoint: str = DEFAULT_ENDPOINT
    root_directory: str = Field(default="", alias="rootdirectory")
    timeout_seconds: float = Field(default=30.0, gt=0)
    list_limit: int = Field(default=1000, gt=0, le=10000)
    convergence_max_attempts: int = Field(default=30, gt=0)
    convergence_initial_delay_seconds: float = Field(default=1.0, ge=0)
    convergence_backoff_multiplier: float = Field(default=1.5, ge=1)
    convergence_max_delay_seconds: float = Field(default=10.0, ge=0)

    @field_validator("bucket")
    @classmethod
    def _validate_bucket(cls, value: str) -> str:
        """Require a non-empty bucket name."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("no bucket parameter provided")
        return normalized

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        """Fall back to the public API host when endpoint is blank."""
        normalized = value.strip().rstrip("/")
        return normalized or DEFAULT_ENDPOINT

    def base_url(self) -> str:
        """Return the REST base URL; bare hosts default to https."""
        if "://" in self.endpoint:
            return self.endpoint
        return f"https://{self.endpoint}"

    def convergence_policy(self) -> ConvergencePolicy:
        """Build the convergence policy used after every mutating call."""
        return ConvergencePolicy(
            max_attempts=self.convergence_max_attempts,
            initial_delay_seconds=self.convergence_initial_delay_seconds,
            backoff_multiplier=self.convergence_backoff_multiplier,
            max_delay_seconds=self.convergence_max_delay_seconds,
        )


def settings_from_parameters(parameters: Mapping[str, object]) -> UpyunDriverSettings:
    """Validate a flat driver parameter map.

    Required options are checked before anything else so a missing bucket
    never reaches client construction. Unknown options are logged and
    skipped; present values are coerced to strings and parsed by the model.
    """
    for name in _REQUIRED_PARAMETERS:
        if name not in parameters or parameters[name] is None:
            raise InvalidDriverParametersError(f"no {name} parameter provided")
    if str(parameters["bucket"]).strip() == "":
        raise InvalidDriverParametersError("no bucket parameter provided")

    known = _known_parameters()
    accepted: dict[str, str] = {}
    for key, value in parameters.items():
        name = str(key)
        if name not in known:
            logger.debug("Ignoring unknown upyun driver parameter: %s", name)
            continue
        if value is not None:
            accepted[name] = str(value)
    return UpyunDriverSettings.model_validate(accepted)


def _known_parameters() -> frozenset[str]:
    names: set[str] = set()
    for name, field in UpyunDriverSettings.model_fields.items():
        names.add(name)
        if field.alias:
            names.add(field.alias)
    return frozenset(names)


def resolve_upyun_settings(settings: RegstoreSettings) -> UpyunDriverSettings:
    """Resolve UpYun driver settings from ``components.substrate.upyun``."""
    return settings_from_parameters(
        component_settings_mapping(settings=settings, component_id=RESOURCE_COMPONENT_ID)
    )
