"""Core data models used across codec, components, service, and CLI."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

WRITE_WITHOUT_RESPONSE = "write-without-response"


class LightAction(str, Enum):
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class Characteristic:
    uuid: str
    handle: int
    properties: frozenset[str]

    @property
    def writable_without_response(self) -> bool:
        return WRITE_WITHOUT_RESPONSE in self.properties


@dataclass(frozen=True)
class AdvertisementEvent:
    address: str
    name: str
    service_data: dict[str, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class SensorReading:
    temperature: float
    humidity: int
    battery: int
    observed_at: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DiscoveredDevice:
    address: str
    name: str
    light_match: bool


@dataclass(frozen=True)
class LightConfig:
    name_contains: tuple[str, ...]
    scan_window_s: float = 2.0


@dataclass(frozen=True)
class SensorConfig:
    service_uuid: str
    name_contains: tuple[str, ...] = ()
    timeout_s: float = 60.0
    interval_s: float = 900.0


@dataclass(frozen=True)
class BridgeConfig:
    light: LightConfig
    sensor: SensorConfig
    adapter: str | None = None
