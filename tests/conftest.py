"""In-memory BLE fakes shared by the test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from lightsense.core.errors import NoAdapterError, TransportSendError
from lightsense.core.model import AdvertisementEvent, Characteristic

WRITE_CHAR = Characteristic(
    uuid="0000ffe1-0000-1000-8000-00805f9b34fb",
    handle=17,
    properties=frozenset({"read", "write-without-response"}),
)
NOTIFY_CHAR = Characteristic(
    uuid="0000ffe2-0000-1000-8000-00805f9b34fb",
    handle=12,
    properties=frozenset({"notify"}),
)


class FakePeripheral:
    def __init__(
        self,
        name: str,
        address: str = "AA:BB:CC:DD:EE:01",
        *,
        characteristics: tuple[Characteristic, ...] = (NOTIFY_CHAR, WRITE_CHAR),
        connect_error: Exception | None = None,
        discover_error: Exception | None = None,
        disconnect_error: Exception | None = None,
        fail_write_at: int | None = None,
    ) -> None:
        self.name = name
        self.address = address
        self._characteristics = characteristics
        self._connect_error = connect_error
        self._discover_error = discover_error
        self._disconnect_error = disconnect_error
        self._fail_write_at = fail_write_at
        self.calls: list[tuple] = []

    @property
    def writes(self) -> list[bytes]:
        return [call[2] for call in self.calls if call[0] == "write"]

    async def connect(self) -> None:
        self.calls.append(("connect",))
        if self._connect_error is not None:
            raise self._connect_error

    async def discover_services(self) -> None:
        self.calls.append(("discover_services",))
        if self._discover_error is not None:
            raise self._discover_error

    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics)

    async def write(self, characteristic: Characteristic, data: bytes) -> None:
        if self._fail_write_at is not None and len(self.writes) == self._fail_write_at:
            raise TransportSendError("link lost")
        self.calls.append(("write", characteristic.handle, data))

    async def disconnect(self) -> None:
        self.calls.append(("disconnect",))
        if self._disconnect_error is not None:
            raise self._disconnect_error


class FakeCentral:
    def __init__(
        self,
        peripherals: list[FakePeripheral] | None = None,
        events: list[AdvertisementEvent] | None = None,
        *,
        has_adapter: bool = True,
    ) -> None:
        self._peripherals = peripherals or []
        self._events = events or []
        self._has_adapter = has_adapter
        self.scanning = False
        self.start_calls = 0
        self.stop_calls = 0

    async def start_scan(self) -> None:
        self.start_calls += 1
        if not self._has_adapter:
            raise NoAdapterError("No Bluetooth adapter available")
        self.scanning = True

    async def stop_scan(self) -> None:
        self.stop_calls += 1
        self.scanning = False

    async def peripherals(self) -> list[FakePeripheral]:
        return list(self._peripherals)

    def events(self) -> AsyncIterator[AdvertisementEvent]:
        async def _iterate() -> AsyncIterator[AdvertisementEvent]:
            for event in self._events:
                yield event

        return _iterate()


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
