"""
Transport clients.

- HTTPClient: request/response over HTTP(S); ping, write, query.
- UDPClient: size-bounded datagrams; write only.

Both implement the `Client` capability set; `new_client` picks one from its config.
"""

from __future__ import annotations

from influxdriver.errors import ConfigError
from influxdriver.transport.base import Client
from influxdriver.transport.http import HTTPClient, HTTPConfig
from influxdriver.transport.udp import UDP_PAYLOAD_SIZE, UDPClient, UDPConfig


def new_client(config: HTTPConfig | UDPConfig) -> Client:
    if isinstance(config, HTTPConfig):
        return HTTPClient(config)
    if isinstance(config, UDPConfig):
        return UDPClient(config)
    raise ConfigError(f"unsupported client config {type(config).__name__}")


__all__ = ["Client", "HTTPClient", "HTTPConfig", "UDPClient", "UDPConfig", "UDP_PAYLOAD_SIZE", "new_client"]
