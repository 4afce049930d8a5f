"""Transport interfaces."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from typing import Protocol

from lightsense.core.model import AdvertisementEvent, Characteristic


class Peripheral(Protocol):
    name: str
    address: str

    async def connect(self) -> None:
        """Open a connection to the peripheral."""

    async def discover_services(self) -> None:
        """Resolve the peripheral's GATT services and characteristics."""

    def characteristics(self) -> Sequence[Characteristic]:
        """Return discovered characteristics in discovery order."""

    async def write(self, characteristic: Characteristic, data: bytes) -> None:
        """Write data to a characteristic without waiting for a response."""

    async def disconnect(self) -> None:
        """Close the connection; a no-op when not connected."""


class Central(Protocol):
    async def start_scan(self) -> None:
        """Start scanning on the adapter, raising NoAdapterError if none exists."""

    async def stop_scan(self) -> None:
        """Stop scanning; a no-op when not scanning."""

    async def peripherals(self) -> Sequence[Peripheral]:
        """Return peripherals seen so far, in adapter enumeration order."""

    def events(self) -> AsyncGenerator[AdvertisementEvent, None]:
        """Subscribe to advertisement events from this point on."""
