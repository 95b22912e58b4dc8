"""Configuration loading utilities for sqlrows."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

COLUMN_WIDENING_CHOICES = ("forbid", "pad")


@dataclass(frozen=True, slots=True)
class MockSettings:
    """Defaults applied when building mock result sets."""

    dialect: str
    column_widening: str  # "forbid" or "pad"


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Logging behaviour."""

    verbose: bool


@dataclass(frozen=True, slots=True)
class MockConfig:
    """Top-level configuration."""

    source_path: Path
    mock: MockSettings
    logging: LoggingSettings

    def with_dialect(self, dialect: str) -> MockConfig:
        """Return a copy with a different default dialect."""
        return replace(self, mock=replace(self.mock, dialect=dialect))

    def with_verbose(self, verbose: bool) -> MockConfig:
        """Return a copy with verbose logging toggled."""
        return replace(self, logging=replace(self.logging, verbose=verbose))


def _default_config() -> dict[str, Any]:
    return {
        "mock": {
            "dialect": "snowflake",
            "column_widening": "forbid",
        },
        "logging": {
            "verbose": False,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "mock.dialect": ("SQLROWS_DIALECT", str),
    "mock.column_widening": ("SQLROWS_COLUMN_WIDENING", str),
    "logging.verbose": ("SQLROWS_VERBOSE", bool),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> MockConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(env if env is not None else os.environ)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    merged: dict[str, Any] = _deep_merge(_default_config(), file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(config_path: str | Path | None, env: Mapping[str, str]) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    return cleaned


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> MockConfig:
    try:
        mock_cfg = data["mock"]
        mock = MockSettings(
            dialect=str(mock_cfg["dialect"]).strip().lower(),
            column_widening=str(mock_cfg["column_widening"]).strip().lower(),
        )
        logging_settings = LoggingSettings(verbose=bool(data["logging"]["verbose"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if mock.column_widening not in COLUMN_WIDENING_CHOICES:
        raise ConfigurationError(
            f"mock.column_widening must be one of {', '.join(COLUMN_WIDENING_CHOICES)}; "
            f"got '{mock.column_widening}'"
        )

    return MockConfig(source_path=source_path, mock=mock, logging=logging_settings)
