from __future__ import annotations

import json

import click
import structlog

log = structlog.get_logger()


def register(main: click.Group) -> None:
    """
    Register `influxdriver ping` onto the root CLI group.
    """

    @main.command("ping")
    @click.option("--dsn", default="", help="Connection string (default: INFLUXDRIVER_DSN)")
    @click.option("--wait", default=-1.0, type=float, help="Seconds to wait for a leader (default: env/config)")
    def ping_cmd(dsn: str, wait: float) -> None:
        """Check server reachability and report its version."""
        from influxdriver.cli import open_cli_connection
        from influxdriver.config import get_ping_wait_s
        from influxdriver.errors import InfluxDriverError

        wait_s = float(wait) if float(wait) >= 0 else get_ping_wait_s()
        try:
            with open_cli_connection(dsn) as conn:
                rtt_s, version = conn.client.ping(wait_s)
        except InfluxDriverError as e:
            log.warning("cli.ping_failed", error=str(e))
            click.echo(json.dumps({"ok": False, "error": str(e)}))
            raise SystemExit(1)
        click.echo(json.dumps({"ok": True, "latency_ms": int(rtt_s * 1000.0), "version": version}))
