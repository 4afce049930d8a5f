"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from lightsense.core.capture import SensorCaptureListener
from lightsense.core.config_loader import load_config
from lightsense.core.device_match import name_matches
from lightsense.core.errors import CaptureTimeoutError, LightsenseError
from lightsense.core.locator import stop_scan_quietly
from lightsense.core.model import BridgeConfig, DiscoveredDevice, LightAction, SensorReading
from lightsense.core.sequencer import LightCommandSequencer
from lightsense.core.store import ReadingStore
from lightsense.transports.base import Central
from lightsense.transports.ble_gatt import BleakCentral

LOGGER = logging.getLogger(__name__)


class BridgeService:
    def __init__(
        self,
        *,
        config: BridgeConfig | None = None,
        config_path: Path | None = None,
        central_factory: Callable[[], Central] | None = None,
        store: ReadingStore | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if config is None:
            loaded = load_config(config_path)
            config = loaded.config
            self.load_warnings = loaded.warnings
        else:
            self.load_warnings = ()
        self.config = config
        self.store = store or ReadingStore()
        self._central_factory = central_factory or self._default_central
        self._sleep = sleep

    def _default_central(self) -> Central:
        return BleakCentral(adapter=self.config.adapter)

    async def perform_light_action(self, action: LightAction) -> None:
        sequencer = LightCommandSequencer(
            self._central_factory(),
            self.config.light.name_contains,
            scan_window_s=self.config.light.scan_window_s,
            sleep=self._sleep,
        )
        await sequencer.run(action)
        LOGGER.info("Light %s sequence completed", action.value)

    async def capture_sensor_reading(self) -> SensorReading | None:
        listener = SensorCaptureListener(
            self._central_factory(),
            self.config.sensor.service_uuid,
            store=self.store,
            name_contains=self.config.sensor.name_contains,
        )
        timeout_s = self.config.sensor.timeout_s
        try:
            return await asyncio.wait_for(listener.capture_once(), timeout_s)
        except asyncio.TimeoutError as exc:
            raise CaptureTimeoutError(
                f"No sensor advertisement captured within {timeout_s:g}s"
            ) from exc

    async def run_sensor_monitor(self, cycles: int | None = None) -> None:
        """Capture a reading every ``sensor.interval_s`` seconds.

        Failures are logged and the loop simply tries again on the next interval.
        """
        completed = 0
        while cycles is None or completed < cycles:
            LOGGER.info("Starting scheduled sensor scan")
            try:
                reading = await self.capture_sensor_reading()
            except LightsenseError as exc:
                LOGGER.warning("Sensor scan failed: %s", exc)
            else:
                if reading is None:
                    LOGGER.warning("Sensor scan ended without a reading")
                else:
                    LOGGER.info("Sensor scan completed successfully")
            completed += 1
            if cycles is None or completed < cycles:
                await self._sleep(self.config.sensor.interval_s)

    async def list_devices(self, scan_window_s: float | None = None) -> list[DiscoveredDevice]:
        central = self._central_factory()
        await central.start_scan()
        try:
            await self._sleep(scan_window_s if scan_window_s is not None else self.config.light.scan_window_s)
            peripherals = await central.peripherals()
        finally:
            await stop_scan_quietly(central)
        return [
            DiscoveredDevice(
                address=p.address,
                name=p.name,
                light_match=name_matches(p.name, self.config.light.name_contains),
            )
            for p in peripherals
        ]

    def latest_reading(self) -> SensorReading | None:
        return self.store.latest()
