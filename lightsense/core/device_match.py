"""Peripheral name matching against configured keyword sets."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from lightsense.transports.base import Peripheral

_P = TypeVar("_P", bound=Peripheral)


def name_matches(name: str | None, keywords: Iterable[str]) -> bool:
    """Case-sensitive substring match; a missing name is treated as empty."""
    name = name or ""
    return any(keyword in name for keyword in keywords)


def first_match(peripherals: Iterable[_P], keywords: Iterable[str]) -> _P | None:
    keywords = tuple(keywords)
    for peripheral in peripherals:
        if name_matches(peripheral.name, keywords):
            return peripheral
    return None
