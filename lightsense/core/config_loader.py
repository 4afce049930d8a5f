"""Configuration loading and validation for YAML-based bridge settings."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from lightsense.core.errors import ConfigLoadError, ConfigValidationError
from lightsense.core.model import BridgeConfig, LightConfig, SensorConfig

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")
_SECTIONS = ("light", "sensor")
CONFIG_FILENAME = "bridge.yaml"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    config: BridgeConfig
    sources: tuple[str, ...]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("lightsense.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def user_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "lightsense" / CONFIG_FILENAME


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _validate(doc: dict[str, Any], source: Path | Traversable) -> None:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _normalize_uuid(value: str, *, context: str) -> str:
    normalized = value.strip().lower()
    if not _UUID_RE.match(normalized):
        raise ConfigValidationError(f"{context} must be a 128-bit UUID string")
    return normalized


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key in _SECTIONS:
            merged[key] = {**base.get(key, {}), **value}
        else:
            merged[key] = value
    return merged


def _build_config(doc: dict[str, Any]) -> BridgeConfig:
    light = doc["light"]
    sensor = doc["sensor"]
    return BridgeConfig(
        adapter=doc.get("adapter"),
        light=LightConfig(
            name_contains=tuple(light["name_contains"]),
            scan_window_s=float(light["scan_window_s"]),
        ),
        sensor=SensorConfig(
            service_uuid=_normalize_uuid(sensor["service_uuid"], context="sensor.service_uuid"),
            name_contains=tuple(sensor.get("name_contains", [])),
            timeout_s=float(sensor["timeout_s"]),
            interval_s=float(sensor["interval_s"]),
        ),
    )


def _config_warnings(config: BridgeConfig) -> list[str]:
    warnings: list[str] = []
    if not config.light.name_contains:
        warnings.append("light.name_contains is empty; no light will ever be located")
    if config.sensor.name_contains and config.sensor.name_contains == config.light.name_contains:
        warnings.append(
            "light.name_contains and sensor.name_contains are identical; "
            "light and sensor discovery will target the same devices"
        )
    return warnings


def load_config(path: Path | None = None) -> LoadedConfig:
    """Load packaged defaults, then overlay ``path`` or the user config file.

    An explicit ``path`` must exist; the user config file is optional.
    """
    default_path = resources.files("lightsense.defaults").joinpath(CONFIG_FILENAME)
    doc = _read_yaml(default_path)
    _validate(doc, default_path)
    sources = [str(default_path)]

    override_path = path
    if override_path is None:
        candidate = user_config_path()
        if candidate.is_file():
            override_path = candidate
    elif not override_path.is_file():
        raise ConfigLoadError(f"Config file {override_path} does not exist")

    if override_path is not None:
        override = _read_yaml(override_path)
        _validate(override, override_path)
        doc = _merge(doc, override)
        sources.append(str(override_path))
        LOGGER.debug("Applied config overrides from %s", override_path)

    config = _build_config(doc)
    warnings = _config_warnings(config)
    for warning in warnings:
        LOGGER.warning(warning)
    return LoadedConfig(config=config, sources=tuple(sources), warnings=tuple(warnings))
