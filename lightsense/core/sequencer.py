"""Light Command Sequencer.

Locates the light, connects, resolves the command characteristic and replays
a fixed, paced series of frames for power on or power off. The light gives no
acknowledgement, so pacing is a set of fixed delays rather than anything
derived from device responses.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum

from lightsense.core import codec
from lightsense.core.errors import (
    ConnectionFailedError,
    NoWritableCharacteristicError,
    ServiceDiscoveryFailedError,
    TransportError,
    WriteFailedError,
)
from lightsense.core.locator import SCAN_WINDOW_S, locate, stop_scan_quietly
from lightsense.core.model import Characteristic, LightAction
from lightsense.transports.base import Central, Peripheral

INTER_FRAME_DELAY_ON_MS = 20
INTER_FRAME_DELAY_OFF_MS = 10
SETTLE_DELAY_MS = 500

ON_LEVEL = 10
ON_COLOR_TEMPERATURE_K = 5600
OFF_LEVEL = 0

LOGGER = logging.getLogger(__name__)


class SequenceState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    LOCATED = "located"
    CONNECTED = "connected"
    SERVICES_DISCOVERED = "services_discovered"
    COMMANDS_SENT = "commands_sent"
    DISCONNECTED = "disconnected"
    FAILED = "failed"


def frames_for(action: LightAction) -> tuple[bytes, ...]:
    if action is LightAction.ON:
        return (
            codec.level_value(ON_LEVEL),
            codec.mode_switch_color_temperature(),
            codec.channel_a_header(),
            codec.word_value(ON_COLOR_TEMPERATURE_K),
        )
    return (
        codec.level_value(OFF_LEVEL),
        codec.mode_switch_hue_saturation(),
    )


def inter_frame_delay_s(action: LightAction) -> float:
    if action is LightAction.ON:
        return INTER_FRAME_DELAY_ON_MS / 1000
    return INTER_FRAME_DELAY_OFF_MS / 1000


def select_command_characteristic(characteristics: Sequence[Characteristic]) -> Characteristic:
    for characteristic in characteristics:
        if characteristic.writable_without_response:
            return characteristic
    raise NoWritableCharacteristicError("No write-without-response characteristic found")


class LightCommandSequencer:
    def __init__(
        self,
        central: Central,
        keywords: Sequence[str],
        *,
        scan_window_s: float = SCAN_WINDOW_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._central = central
        self._keywords = tuple(keywords)
        self._scan_window_s = scan_window_s
        self._sleep = sleep
        self.state = SequenceState.IDLE

    def _transition(self, state: SequenceState) -> None:
        LOGGER.debug("Light sequence %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self, action: LightAction) -> None:
        """Run the frame sequence for ``action`` against the first matching light.

        Any failure aborts the remaining steps. Once a connection was attempted
        a best-effort disconnect always follows.
        """
        try:
            light = await self._locate()
            try:
                await self._send(light, action)
            finally:
                await self._disconnect_quietly(light)
        except Exception:
            self._transition(SequenceState.FAILED)
            raise
        self._transition(SequenceState.DISCONNECTED)

    async def _locate(self) -> Peripheral:
        self._transition(SequenceState.SCANNING)
        try:
            light = await locate(
                self._central,
                self._keywords,
                scan_window_s=self._scan_window_s,
                sleep=self._sleep,
            )
        finally:
            await stop_scan_quietly(self._central)
        self._transition(SequenceState.LOCATED)
        return light

    async def _send(self, light: Peripheral, action: LightAction) -> None:
        try:
            await light.connect()
        except TransportError as exc:
            raise ConnectionFailedError(f"Could not connect to {light.name}: {exc}") from exc
        self._transition(SequenceState.CONNECTED)

        try:
            await light.discover_services()
        except TransportError as exc:
            raise ServiceDiscoveryFailedError(
                f"Service discovery failed on {light.name}: {exc}"
            ) from exc
        self._transition(SequenceState.SERVICES_DISCOVERED)

        characteristic = select_command_characteristic(light.characteristics())
        delay_s = inter_frame_delay_s(action)
        for index, packet in enumerate(frames_for(action)):
            if index:
                await self._sleep(delay_s)
            try:
                await light.write(characteristic, packet)
            except TransportError as exc:
                raise WriteFailedError(
                    f"Writing frame {index} ({packet.hex()}) failed: {exc}",
                    frame_index=index,
                    packet=packet,
                ) from exc
            LOGGER.debug("Wrote frame %d: %s", index, packet.hex())
        self._transition(SequenceState.COMMANDS_SENT)

        await self._sleep(SETTLE_DELAY_MS / 1000)

    async def _disconnect_quietly(self, light: Peripheral) -> None:
        try:
            await light.disconnect()
        except Exception as exc:
            LOGGER.debug("Ignoring disconnect failure for %s: %s", light.name, exc)
