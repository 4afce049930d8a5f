"""Device Locator: scan, wait out the scan window, pick the first keyword match."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from lightsense.core.device_match import first_match
from lightsense.core.errors import DeviceNotFoundError
from lightsense.transports.base import Central, Peripheral

SCAN_WINDOW_S = 2
LOGGER = logging.getLogger(__name__)


async def locate(
    central: Central,
    keywords: Sequence[str],
    *,
    scan_window_s: float = SCAN_WINDOW_S,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Peripheral:
    """Return the first peripheral, in enumeration order, whose name contains a keyword.

    Enumeration order is whatever the adapter reports and is not guaranteed to
    be stable between scans. The scan is left running; callers own teardown.
    """
    await central.start_scan()
    await sleep(scan_window_s)

    peripherals = await central.peripherals()
    LOGGER.debug("Scan window elapsed, %d peripheral(s) known", len(peripherals))

    match = first_match(peripherals, keywords)
    if match is None:
        wanted = ", ".join(repr(k) for k in keywords)
        raise DeviceNotFoundError(f"No peripheral name contains any of: {wanted}")

    LOGGER.info("Located %s (%s)", match.name, match.address)
    return match


async def stop_scan_quietly(central: Central) -> None:
    """Stop scanning, logging and discarding any failure."""
    try:
        await central.stop_scan()
    except Exception as exc:
        LOGGER.debug("Ignoring stop_scan failure: %s", exc)
