"""Domain-specific errors for lightsense."""

from __future__ import annotations


class LightsenseError(Exception):
    """Base error for lightsense."""


class ConfigLoadError(LightsenseError):
    """Raised when a configuration file cannot be read."""


class ConfigValidationError(LightsenseError):
    """Raised when configuration does not conform to schema or semantics."""


class NoAdapterError(LightsenseError):
    """Raised when no usable Bluetooth adapter is available."""


class DeviceNotFoundError(LightsenseError):
    """Raised when no discovered peripheral matches the configured keywords."""


class LightControlError(LightsenseError):
    """Base error for a failed light command sequence."""


class ConnectionFailedError(LightControlError):
    """Raised when connecting to the located light fails."""


class ServiceDiscoveryFailedError(LightControlError):
    """Raised when GATT service discovery on the light fails."""


class NoWritableCharacteristicError(LightControlError):
    """Raised when the light exposes no write-without-response characteristic."""


class WriteFailedError(LightControlError):
    """Raised when writing a command frame fails; remaining frames are skipped."""

    def __init__(self, message: str, *, frame_index: int, packet: bytes) -> None:
        super().__init__(message)
        self.frame_index = frame_index
        self.packet = packet


class CaptureError(LightsenseError):
    """Base error for sensor capture failures."""


class CaptureTimeoutError(CaptureError):
    """Raised when no sensor advertisement was captured within the timeout."""


class TransportError(LightsenseError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised on BLE connect failures."""


class TransportTimeoutError(TransportConnectError):
    """Raised when a BLE connect attempt times out."""


class TransportDiscoveryError(TransportError):
    """Raised when GATT service discovery fails."""


class TransportSendError(TransportError):
    """Raised when payload sending fails."""
