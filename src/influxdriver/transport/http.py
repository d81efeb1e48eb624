from __future__ import annotations

import time
from dataclasses import dataclass
from urllib.parse import urlsplit

import requests
import structlog

from influxdriver.errors import ConfigError, TransportError
from influxdriver.models import Query, Response, WriteConfig
from influxdriver.transport.base import Client

log = structlog.get_logger()

DEFAULT_USER_AGENT = "InfluxDBClient"
VERSION_HEADER = "X-Influxdb-Version"


@dataclass(frozen=True)
class HTTPConfig:
    """
    Config for the HTTP client.

    `addr` must look like "http://host:port" or "https://host:port".
    `timeout` is in seconds; None or 0 means no timeout.
    """

    addr: str
    username: str = ""
    password: str = ""
    user_agent: str = ""
    timeout: float | None = None
    insecure_skip_verify: bool = False


class HTTPClient(Client):
    """
    Reliable transport over HTTP(S).

    Configuration is read-only after construction and every call builds its own
    request, so one client can be shared across threads.
    """

    def __init__(self, config: HTTPConfig) -> None:
        parts = urlsplit(str(config.addr or ""))
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ConfigError(
                f"Unsupported protocol scheme: {parts.scheme or '<none>'}, "
                "your address must start with http:// or https://"
            )
        self.base_url = f"{parts.scheme}://{parts.netloc}"
        self.username = config.username
        self.password = config.password
        self.user_agent = config.user_agent or DEFAULT_USER_AGENT
        self.timeout = float(config.timeout) if config.timeout else None
        self.session = requests.Session()
        self.session.verify = not bool(config.insecure_skip_verify)

    def _request(self, method: str, path: str, *, params: dict[str, str], data: bytes | None = None) -> requests.Response:
        headers = {"User-Agent": self.user_agent}
        if method == "POST":
            headers["Content-Type"] = ""
        auth = (self.username, self.password) if self.username else None
        try:
            return self.session.request(
                method,
                f"{self.base_url}/{path}",
                params=params,
                data=data,
                headers=headers,
                auth=auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.warning("influx.request_failed", method=method, path=path, error=str(e))
            raise TransportError(str(e)) from e

    def ping(self, timeout: float = 0) -> tuple[float, str]:
        """
        Check the server; `timeout` > 0 asks it to wait that long for a leader.

        Returns (round-trip seconds, server version).
        """
        params: dict[str, str] = {}
        if timeout and float(timeout) > 0:
            params["wait_for_leader"] = f"{float(timeout):.0f}s"
        t0 = time.monotonic()
        resp = self._request("GET", "ping", params=params)
        if resp.status_code != 204:
            raise TransportError(resp.text, status_code=resp.status_code, body=resp.text)
        return time.monotonic() - t0, resp.headers.get(VERSION_HEADER, "")

    def write(self, data: bytes, config: WriteConfig) -> None:
        params = {"db": config.database}
        if config.retention_policy:
            params["rp"] = config.retention_policy
        if config.precision:
            params["precision"] = config.precision
        if config.consistency:
            params["consistency"] = config.consistency
        resp = self._request("POST", "write", params=params, data=bytes(data))
        if resp.status_code not in (200, 204):
            log.debug("influx.write_failed", db=config.database, status=resp.status_code)
            raise TransportError(resp.text, status_code=resp.status_code, body=resp.text)
        log.debug("influx.write", db=config.database, bytes=len(data))

    def query(self, q: Query) -> Response:
        """
        Run a statement and decode the response.

        A response carrying an error message is returned as-is; callers surface
        it with Response.raise_for_error().
        """
        params = {"q": q.command, "db": q.database}
        if q.precision:
            params["epoch"] = q.precision
        resp = self._request("POST", "query", params=params)
        status = resp.status_code
        try:
            response = Response.from_json(resp.content)
        except (ValueError, TypeError, AttributeError) as e:
            # Empty or malformed bodies are expected on error statuses; the status wins.
            if status != 200:
                raise TransportError(
                    resp.text or f"received status code {status} from server", status_code=status, body=resp.text
                ) from e
            raise TransportError(f"unable to decode json: received status code {status} err: {e}", status_code=status, body=resp.text) from e
        if status != 200 and response.error() is None:
            raise TransportError(f"received status code {status} from server", status_code=status, body=resp.text)
        log.debug("influx.query", db=q.database, status=status, results=len(response.results))
        return response

    def close(self) -> None:
        self.session.close()
