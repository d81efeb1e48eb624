from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from influxdriver.models import Query, Response, WriteConfig


class Client(ABC):
    """
    Capability set shared by every transport.

    Errors are raised (TransportError, ProtocolError, UnsupportedOperationError),
    never returned.
    """

    @abstractmethod
    def ping(self, timeout: float = 0) -> tuple[float, str]:
        """Return (round-trip seconds, server version)."""
        raise NotImplementedError

    @abstractmethod
    def write(self, data: bytes, config: WriteConfig) -> None:
        """Send a line-protocol payload."""
        raise NotImplementedError

    @abstractmethod
    def query(self, q: Query) -> Response:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
