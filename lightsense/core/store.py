"""Single-slot store holding the most recent sensor reading."""

from __future__ import annotations

import threading

from lightsense.core.model import SensorReading


class ReadingStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reading: SensorReading | None = None

    def publish(self, reading: SensorReading) -> None:
        with self._lock:
            self._reading = reading

    def latest(self) -> SensorReading | None:
        with self._lock:
            return self._reading
