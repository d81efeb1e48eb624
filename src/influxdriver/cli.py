"""
influxdriver CLI thin entrypoint.

Command implementations are registered from `influxdriver.cli_commands.*`.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys

import click
import structlog

from influxdriver.config import get_dsn, get_udp_payload_size, get_user_agent, load_config
from influxdriver.driver import Connection, ConnectionConfig, open_connection, parse_dsn

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    env_level = os.environ.get("INFLUXDRIVER_LOG_LEVEL", "").strip().lower()
    if verbose or env_level in {"debug", "trace"}:
        level = logging.DEBUG
    elif env_level in {"info"}:
        level = logging.INFO
    elif env_level == "error":
        level = logging.ERROR
    elif env_level == "critical":
        level = logging.CRITICAL
    else:
        level = logging.WARNING
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    # Logs go to stderr so command output on stdout stays machine-readable.
    logging.basicConfig(format="%(message)s", level=level, handlers=[logging.StreamHandler(sys.stderr)])
    # Keep connection-pool chatter out of debug output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def resolve_connection_config(dsn: str = "") -> ConnectionConfig:
    """
    Parse `dsn` (or INFLUXDRIVER_DSN) and fill gaps from the environment.
    """
    cfg = parse_dsn(str(dsn).strip() or get_dsn())
    if not cfg.user_agent and get_user_agent():
        cfg = dataclasses.replace(cfg, user_agent=get_user_agent())
    if cfg.scheme == "udp" and cfg.payload_size <= 0:
        cfg = dataclasses.replace(cfg, payload_size=get_udp_payload_size())
    return cfg


def open_cli_connection(dsn: str = "") -> Connection:
    return open_connection(resolve_connection_config(dsn))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """influxdriver: line-protocol writes and queries against an InfluxDB-style server."""
    load_config()
    _setup_logging(verbose)
    ctx.ensure_object(dict)


# Command groups live in `influxdriver.cli_commands.*` and are registered here.
from influxdriver.cli_commands.data import register as _register_data
from influxdriver.cli_commands.server import register as _register_server

_register_data(main)
_register_server(main)


def entrypoint() -> None:
    main()


if __name__ == "__main__":
    entrypoint()
