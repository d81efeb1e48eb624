from __future__ import annotations

import socket
from dataclasses import dataclass

import structlog

from influxdriver.errors import ConfigError, TransportError, UnsupportedOperationError
from influxdriver.models import Query, Response, WriteConfig
from influxdriver.transport.base import Client
from influxdriver.transport.chunking import iter_chunks

log = structlog.get_logger()

# Reasonable default for datagrams that may cross the internet.
UDP_PAYLOAD_SIZE = 512


def split_host_port(addr: str) -> tuple[str, int]:
    """Split "host:port" or "[ipv6-host]:port"."""
    a = str(addr or "").strip()
    host, sep, port = a.rpartition(":")
    if not sep or not host or not port:
        raise ConfigError(f"invalid UDP address {addr!r}, expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        return host, int(port)
    except ValueError:
        raise ConfigError(f"invalid port in UDP address {addr!r}") from None


@dataclass(frozen=True)
class UDPConfig:
    """
    Config for the UDP client.

    `payload_size` is the maximum datagram size; 0 means UDP_PAYLOAD_SIZE.
    """

    addr: str
    payload_size: int = 0


class UDPClient(Client):
    """
    Fire-and-forget transport: writes only, one datagram per chunk, no acknowledgement.
    """

    def __init__(self, config: UDPConfig) -> None:
        host, port = split_host_port(config.addr)
        self.payload_size = int(config.payload_size) if int(config.payload_size or 0) > 0 else UDP_PAYLOAD_SIZE
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
            family, socktype, proto, _, sockaddr = infos[0]
            self.sock = socket.socket(family, socktype, proto)
            self.sock.connect(sockaddr)
        except OSError as e:
            raise TransportError(f"unable to open UDP socket to {config.addr}: {e}") from e

    def ping(self, timeout: float = 0) -> tuple[float, str]:
        # No response channel over UDP.
        return 0.0, ""

    def write(self, data: bytes, config: WriteConfig) -> None:
        sent = 0
        for chunk in iter_chunks(bytes(data), self.payload_size):
            try:
                self.sock.send(chunk)
            except OSError as e:
                # Datagrams already sent are not recalled.
                log.warning("influx.udp_send_failed", sent_chunks=sent, error=str(e))
                raise TransportError(f"UDP send failed after {sent} chunk(s): {e}") from e
            sent += 1
        log.debug("influx.udp_write", chunks=sent, bytes=len(data))

    def query(self, q: Query) -> Response:
        raise UnsupportedOperationError("querying not supported over this transport")

    def close(self) -> None:
        self.sock.close()
