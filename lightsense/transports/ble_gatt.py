"""BLE GATT transport implementation backed by bleak."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Any

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from lightsense.core.errors import (
    NoAdapterError,
    TransportConnectError,
    TransportDiscoveryError,
    TransportSendError,
    TransportTimeoutError,
)
from lightsense.core.model import AdvertisementEvent, Characteristic

LOGGER = logging.getLogger(__name__)


def _advertised_name(device: BLEDevice, advertisement_data: AdvertisementData) -> str:
    return advertisement_data.local_name or device.name or ""


class BleakPeripheral:
    def __init__(self, device: BLEDevice, name: str, *, timeout_s: float = 10.0) -> None:
        self.device = device
        self.name = name
        self.address = device.address
        self._timeout_s = timeout_s
        self._client: BleakClient | None = None
        self._characteristics: list[Characteristic] = []

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._client.is_connected

    async def connect(self) -> None:
        client = BleakClient(self.device, timeout=self._timeout_s)
        self._client = client
        try:
            await client.connect()
        except asyncio.TimeoutError as exc:
            raise TransportTimeoutError(f"BLE connect timed out for {self.address}") from exc
        except (BleakError, OSError) as exc:
            raise TransportConnectError(f"BLE connect failed for {self.address}: {exc}") from exc
        if not client.is_connected:
            raise TransportConnectError(f"BLE connect failed for {self.address}")

    async def discover_services(self) -> None:
        # bleak resolves the GATT table as part of connect().
        if not self.is_connected:
            raise TransportDiscoveryError(f"Not connected to {self.address}")
        try:
            services = self._client.services
        except BleakError as exc:
            raise TransportDiscoveryError(
                f"Service discovery failed for {self.address}: {exc}"
            ) from exc

        self._characteristics = [
            Characteristic(
                uuid=char.uuid.lower(),
                handle=char.handle,
                properties=frozenset(char.properties),
            )
            for service in services
            for char in service.characteristics
        ]

    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics)

    async def write(self, characteristic: Characteristic, data: bytes) -> None:
        if not self.is_connected:
            raise TransportSendError(f"Not connected to {self.address}")
        try:
            await self._client.write_gatt_char(characteristic.handle, data, response=False)
        except (BleakError, OSError, asyncio.TimeoutError) as exc:
            raise TransportSendError(
                f"BLE write to {characteristic.uuid} failed: {exc}"
            ) from exc

    async def disconnect(self) -> None:
        client, self._client = self._client, None
        if client is None or not client.is_connected:
            return
        await client.disconnect()


class BleakCentral:
    """Scanner wrapper exposing discovered peripherals and advertisement events."""

    def __init__(self, *, adapter: str | None = None, connect_timeout_s: float = 10.0) -> None:
        self._adapter = adapter
        self._connect_timeout_s = connect_timeout_s
        self._scanner: BleakScanner | None = None
        self._subscribers: list[asyncio.Queue[AdvertisementEvent | None]] = []

    async def start_scan(self) -> None:
        if self._scanner is not None:
            return
        kwargs: dict[str, Any] = {"detection_callback": self._on_advertisement}
        if self._adapter:
            kwargs["adapter"] = self._adapter
        try:
            scanner = BleakScanner(**kwargs)
            await scanner.start()
        except (BleakError, OSError) as exc:
            raise NoAdapterError(f"No Bluetooth adapter available: {exc}") from exc
        self._scanner = scanner
        LOGGER.debug("Scan started (adapter=%s)", self._adapter or "default")

    async def stop_scan(self) -> None:
        scanner, self._scanner = self._scanner, None
        if scanner is None:
            return
        try:
            await scanner.stop()
        finally:
            for queue in self._subscribers:
                queue.put_nowait(None)
        LOGGER.debug("Scan stopped")

    async def peripherals(self) -> list[BleakPeripheral]:
        if self._scanner is None:
            return []
        return [
            BleakPeripheral(
                device,
                _advertised_name(device, advertisement_data),
                timeout_s=self._connect_timeout_s,
            )
            for device, advertisement_data in self._scanner.discovered_devices_and_advertisement_data.values()
        ]

    def events(self) -> AsyncGenerator[AdvertisementEvent, None]:
        queue: asyncio.Queue[AdvertisementEvent | None] = asyncio.Queue()
        self._subscribers.append(queue)
        return self._drain(queue)

    async def _drain(
        self, queue: asyncio.Queue[AdvertisementEvent | None]
    ) -> AsyncGenerator[AdvertisementEvent, None]:
        try:
            while True:
                event = await queue.get()
                if event is None:
                    return
                yield event
        finally:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    def _on_advertisement(self, device: BLEDevice, advertisement_data: AdvertisementData) -> None:
        event = AdvertisementEvent(
            address=device.address,
            name=_advertised_name(device, advertisement_data),
            service_data={
                uuid.lower(): bytes(data) for uuid, data in advertisement_data.service_data.items()
            },
        )
        for queue in self._subscribers:
            queue.put_nowait(event)
