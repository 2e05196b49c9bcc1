"""Tests for pydantic-settings-backed shared configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.regstore_shared.config import (
    RegstoreSettings,
    component_settings_mapping,
    load_settings,
)
from resources.substrates.upyun.config import resolve_upyun_settings


def test_load_settings_uses_regstore_precedence_cascade(tmp_path: Path) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "regstore.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "components:",
                "  substrate:",
                "    upyun:",
                "      username: operator",
                "      password: from-yaml",
                "      bucket: yaml-bucket",
                "      rootdirectory: /reg",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}},
        environ={
            "REGSTORE_LOGGING__LEVEL": "ERROR",
            "REGSTORE_LOGGING__JSON_OUTPUT": "false",
            "REGSTORE_COMPONENTS__SUBSTRATE__UPYUN__BUCKET": "env-bucket",
            "REGSTORE_COMPONENTS__SUBSTRATE__UPYUN__LIST_LIMIT": "200",
        },
        config_path=config_file,
    )
    upyun = resolve_upyun_settings(settings)

    assert settings.logging.level == "DEBUG"
    assert settings.logging.json_output is False
    assert upyun.bucket == "env-bucket"
    assert upyun.password == "from-yaml"
    assert upyun.root_directory == "/reg"
    assert upyun.list_limit == 200


def test_load_settings_uses_model_defaults_when_sources_missing(tmp_path: Path) -> None:
    """Settings should fall back to model defaults when env and YAML are absent."""
    settings = load_settings(config_path=tmp_path / "regstore.yaml", environ={})

    assert settings.logging.service == "regstore"
    assert settings.logging.level == "INFO"
    assert settings.storage.driver == "upyun"
    assert component_settings_mapping(settings=settings, component_id="substrate_upyun") == {}


@pytest.mark.parametrize("raw", ["1e3", "true", "1_000", "none", "00123"])
def test_component_env_values_stay_raw_strings(tmp_path: Path, raw: str) -> None:
    """Component credentials from env should reach the driver exactly as written."""
    settings = load_settings(
        config_path=tmp_path / "regstore.yaml",
        environ={
            "REGSTORE_COMPONENTS__SUBSTRATE__UPYUN__USERNAME": "operator",
            "REGSTORE_COMPONENTS__SUBSTRATE__UPYUN__PASSWORD": raw,
            "REGSTORE_COMPONENTS__SUBSTRATE__UPYUN__BUCKET": "registry",
        },
    )

    mapping = component_settings_mapping(settings=settings, component_id="substrate_upyun")

    assert mapping["password"] == raw
    assert resolve_upyun_settings(settings).password == raw


def test_non_component_env_values_are_still_coerced(tmp_path: Path) -> None:
    """Typed sections outside components keep scalar coercion."""
    settings = load_settings(
        config_path=tmp_path / "regstore.yaml",
        environ={"REGSTORE_LOGGING__JSON_OUTPUT": "true"},
    )

    assert settings.logging.json_output is True


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    """Config files must contain a top-level mapping."""
    config_file = tmp_path / "regstore.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="top-level mapping"):
        load_settings(config_path=config_file, environ={})


def test_unknown_component_id_is_rejected() -> None:
    """Only substrate component ids resolve to a namespace."""
    with pytest.raises(ValueError, match="unsupported component id"):
        component_settings_mapping(settings=RegstoreSettings.model_validate({}), component_id="service_x")


def test_blank_storage_driver_is_rejected() -> None:
    """storage.driver must name a driver."""
    with pytest.raises(ValueError, match="storage.driver is required"):
        RegstoreSettings.model_validate({"storage": {"driver": "  "}})


def test_direct_construction_reads_env_over_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Constructing RegstoreSettings directly should apply env over YAML."""
    config_file = tmp_path / "regstore.yaml"
    config_file.write_text(
        "logging:\n  level: WARNING\n  service: from-yaml\n", encoding="utf-8"
    )
    monkeypatch.setattr(RegstoreSettings, "_config_path", config_file)
    monkeypatch.setenv("REGSTORE_LOGGING__LEVEL", "ERROR")

    settings = RegstoreSettings()

    assert settings.logging.level == "ERROR"
    assert settings.logging.service == "from-yaml"
