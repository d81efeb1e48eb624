"""
Error taxonomy shared by the transport clients and the driver adapter.

Nothing here is retried internally; every error reaches the caller as raised.
"""

from __future__ import annotations


class InfluxDriverError(Exception):
    """Base class for all influxdriver errors."""


class ConfigError(InfluxDriverError):
    """Malformed address, scheme, or connection-string parameter."""


class TransportError(InfluxDriverError):
    """
    Network-level failure, unexpected HTTP status, or undecodable response.

    `status_code` and `body` are set when the failure came from an HTTP response.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProtocolError(InfluxDriverError):
    """The server answered with a well-formed error message."""


class UnsupportedOperationError(InfluxDriverError):
    """The operation is not available on this transport or object."""


class TransactionError(UnsupportedOperationError):
    """Transaction state violation (second begin, reuse after commit/rollback)."""
