from __future__ import annotations

import json

import click
import structlog

log = structlog.get_logger()


def _fail(error: Exception) -> None:
    click.echo(json.dumps({"ok": False, "error": str(error)}))
    raise SystemExit(1)


def register(main: click.Group) -> None:
    """
    Register `influxdriver exec|query|write` onto the root CLI group.
    """

    @main.command("exec")
    @click.argument("statement")
    @click.option("--dsn", default="", help="Connection string (default: INFLUXDRIVER_DSN)")
    def exec_cmd(statement: str, dsn: str) -> None:
        """Execute one statement through the driver (INSERT INTO <db>.<line> writes)."""
        from influxdriver.cli import open_cli_connection
        from influxdriver.errors import InfluxDriverError

        try:
            with open_cli_connection(dsn) as conn:
                res = conn.execute(statement)
        except InfluxDriverError as e:
            log.warning("cli.exec_failed", error=str(e))
            _fail(e)
            return
        click.echo(json.dumps({"ok": True, "rows_affected": res.rows_affected, "last_insert_id": res.last_insert_id}))

    @main.command("query")
    @click.argument("statement")
    @click.option("--dsn", default="", help="Connection string (default: INFLUXDRIVER_DSN)")
    @click.option("--db", "database", default="", help="Database (default: from the connection string)")
    @click.option("--precision", default="", help="Epoch precision for timestamps (ns, u, ms, s, m, h)")
    def query_cmd(statement: str, dsn: str, database: str, precision: str) -> None:
        """Run a query and print the decoded response as JSON."""
        from influxdriver.cli import open_cli_connection
        from influxdriver.errors import InfluxDriverError
        from influxdriver.models import Query

        try:
            with open_cli_connection(dsn) as conn:
                q = Query(
                    command=statement,
                    database=str(database).strip() or conn.database,
                    precision=str(precision).strip(),
                )
                resp = conn.client.query(q)
                resp.raise_for_error()
        except InfluxDriverError as e:
            log.warning("cli.query_failed", error=str(e))
            _fail(e)
            return
        # Decimals are printed as their exact text.
        click.echo(json.dumps(resp.to_dict(), default=str))

    @main.command("write")
    @click.argument("source", type=click.File("rb"), default="-")
    @click.option("--dsn", default="", help="Connection string (default: INFLUXDRIVER_DSN)")
    @click.option("--db", "database", default="", help="Database (default: from the connection string)")
    @click.option("--rp", "retention_policy", default="", help="Retention policy")
    @click.option("--precision", default="", help="Timestamp precision of the input (server default: ns)")
    @click.option("--consistency", default="", help="Write consistency level (any, one, quorum, all)")
    def write_cmd(source, dsn: str, database: str, retention_policy: str, precision: str, consistency: str) -> None:
        """Write a line-protocol file (or stdin) in one call."""
        from influxdriver.cli import open_cli_connection
        from influxdriver.errors import InfluxDriverError
        from influxdriver.models import WriteConfig

        data = source.read()
        if not data.strip():
            click.echo("No line-protocol data to write", err=True)
            raise SystemExit(2)
        try:
            with open_cli_connection(dsn) as conn:
                cfg = WriteConfig(
                    database=str(database).strip() or conn.database,
                    precision=str(precision).strip(),
                    retention_policy=str(retention_policy).strip(),
                    consistency=str(consistency).strip(),
                )
                conn.client.write(data, cfg)
        except InfluxDriverError as e:
            log.warning("cli.write_failed", error=str(e))
            _fail(e)
            return
        lines = sum(1 for ln in data.splitlines() if ln.strip())
        click.echo(json.dumps({"ok": True, "db": cfg.database, "lines": lines, "bytes": len(data)}))
