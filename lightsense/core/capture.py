"""Sensor Capture Listener: decode the first matching service-data advertisement."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from contextlib import aclosing

from lightsense.core import codec
from lightsense.core.device_match import name_matches
from lightsense.core.locator import stop_scan_quietly
from lightsense.core.model import AdvertisementEvent, SensorReading
from lightsense.core.store import ReadingStore
from lightsense.transports.base import Central

LOGGER = logging.getLogger(__name__)


class SensorCaptureListener:
    """Consumes advertisement events until one payload for ``service_uuid`` decodes.

    The listener has no timeout of its own; callers bound it (see
    ``BridgeService.capture_sensor_reading``).
    """

    def __init__(
        self,
        central: Central,
        service_uuid: str,
        *,
        store: ReadingStore | None = None,
        name_contains: Sequence[str] = (),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._central = central
        self._service_uuid = service_uuid.lower()
        self._store = store
        self._name_contains = tuple(name_contains)
        self._clock = clock

    async def capture_once(self) -> SensorReading | None:
        async with aclosing(self._central.events()) as events:
            await self._central.start_scan()
            LOGGER.info("Scanning for sensor service %s", self._service_uuid)
            try:
                async for event in events:
                    reading = self._decode_event(event)
                    if reading is not None:
                        if self._store is not None:
                            self._store.publish(reading)
                        LOGGER.info(
                            "Sensor updated: %.1f°C %d%% (battery %d%%)",
                            reading.temperature,
                            reading.humidity,
                            reading.battery,
                        )
                        return reading
            finally:
                await stop_scan_quietly(self._central)
        LOGGER.info("Advertisement stream ended without a sensor reading")
        return None

    def _decode_event(self, event: AdvertisementEvent) -> SensorReading | None:
        if self._name_contains and not name_matches(event.name, self._name_contains):
            return None
        for uuid, payload in event.service_data.items():
            if uuid.lower() != self._service_uuid:
                continue
            decoded = codec.decode_sensor_payload(payload)
            if decoded is None:
                LOGGER.debug("Skipping short payload from %s: %s", event.address, payload.hex())
                continue
            temperature, humidity, battery = decoded
            return SensorReading(
                temperature=temperature,
                humidity=humidity,
                battery=battery,
                observed_at=int(self._clock()),
            )
        return None
