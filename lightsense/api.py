"""Stable public API for building tooling on top of lightsense.

This module is the supported integration surface for third-party callers
(web front-ends, schedulers, scripts). Avoid importing from internal modules
unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from collections.abc import Callable

from lightsense.core.errors import (
    CaptureError,
    CaptureTimeoutError,
    ConfigLoadError,
    ConfigValidationError,
    ConnectionFailedError,
    DeviceNotFoundError,
    LightControlError,
    LightsenseError,
    NoAdapterError,
    NoWritableCharacteristicError,
    ServiceDiscoveryFailedError,
    TransportError,
    WriteFailedError,
)
from lightsense.core.model import (
    BridgeConfig,
    DiscoveredDevice,
    LightAction,
    LightConfig,
    SensorConfig,
    SensorReading,
)
from lightsense.core.service import BridgeService
from lightsense.core.store import ReadingStore
from lightsense.transports.base import Central

__all__ = [
    "LightsenseError",
    "ConfigLoadError",
    "ConfigValidationError",
    "NoAdapterError",
    "DeviceNotFoundError",
    "LightControlError",
    "ConnectionFailedError",
    "ServiceDiscoveryFailedError",
    "NoWritableCharacteristicError",
    "WriteFailedError",
    "CaptureError",
    "CaptureTimeoutError",
    "TransportError",
    "BridgeConfig",
    "LightConfig",
    "SensorConfig",
    "DiscoveredDevice",
    "LightAction",
    "SensorReading",
    "ReadingStore",
    "Client",
]


class Client:
    """Public client wrapping light control and sensor capture.

    The client owns a single-slot `ReadingStore`; every successful capture
    replaces its value, and `latest_reading()` returns whatever is current.
    """

    def __init__(
        self,
        *,
        config: BridgeConfig | None = None,
        central_factory: Callable[[], Central] | None = None,
        store: ReadingStore | None = None,
    ) -> None:
        self._service = BridgeService(config=config, central_factory=central_factory, store=store)

    @property
    def config(self) -> BridgeConfig:
        return self._service.config

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    async def light_on(self) -> None:
        await self._service.perform_light_action(LightAction.ON)

    async def light_off(self) -> None:
        await self._service.perform_light_action(LightAction.OFF)

    async def capture_reading(self) -> SensorReading | None:
        return await self._service.capture_sensor_reading()

    async def list_devices(self, scan_window_s: float | None = None) -> list[DiscoveredDevice]:
        return await self._service.list_devices(scan_window_s)

    def latest_reading(self) -> SensorReading | None:
        return self._service.latest_reading()
