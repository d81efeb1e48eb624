"""
influxdriver: client library and statement driver for InfluxDB-style time-series servers.

This package provides:
- HTTP and UDP transport clients sharing one capability set (ping/write/query/close)
- Line-protocol points and batches
- Datagram chunking for fire-and-forget UDP ingestion
- A statement driver: `INSERT INTO <db>.<line protocol>` writes, everything else queries
- A transaction shim that batches explicitly added points until commit
"""

from influxdriver.driver import Connection, ConnectionConfig, ExecResult, connect, open_connection, parse_dsn
from influxdriver.errors import (
    ConfigError,
    InfluxDriverError,
    ProtocolError,
    TransactionError,
    TransportError,
    UnsupportedOperationError,
)
from influxdriver.models import BatchPoints, Point, Query, Response, WriteConfig
from influxdriver.transaction import Transaction

__version__ = "0.1.0"

__all__ = [
    "BatchPoints",
    "ConfigError",
    "Connection",
    "ConnectionConfig",
    "ExecResult",
    "InfluxDriverError",
    "Point",
    "ProtocolError",
    "Query",
    "Response",
    "Transaction",
    "TransactionError",
    "TransportError",
    "UnsupportedOperationError",
    "WriteConfig",
    "connect",
    "open_connection",
    "parse_dsn",
]
