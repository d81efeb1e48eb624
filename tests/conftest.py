from __future__ import annotations

from typing import Any

import pytest

from influxdriver.driver import Connection
from influxdriver.models import Query, Response, Result, WriteConfig
from influxdriver.transport.base import Client


class FakeClient(Client):
    """
    In-memory Client that records every call.

    `response` is returned from query(); `write_error` is raised from write().
    """

    def __init__(self) -> None:
        self.writes: list[tuple[bytes, WriteConfig]] = []
        self.queries: list[Query] = []
        self.response = Response(results=[Result()])
        self.write_error: Exception | None = None
        self.closed = 0

    def ping(self, timeout: float = 0) -> tuple[float, str]:
        return 0.001, "1.8.10"

    def write(self, data: bytes, config: WriteConfig) -> None:
        self.writes.append((bytes(data), config))
        if self.write_error is not None:
            raise self.write_error

    def query(self, q: Query) -> Response:
        self.queries.append(q)
        return self.response

    def close(self) -> None:
        self.closed += 1


class FakeHTTPResponse:
    def __init__(self, status_code: int, body: bytes | str = b"", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.text = self.content.decode("utf-8", errors="replace")
        self.headers = dict(headers or {})


@pytest.fixture()
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture()
def conn(fake_client: FakeClient) -> Connection:
    return Connection(fake_client, database="telegraf", precision="ms")


@pytest.fixture()
def record_requests():
    """
    Patch a client's session.request to return canned responses and record calls.

    Usage: calls = record_requests(client, FakeHTTPResponse(204))
    """

    def _install(client: Any, *responses: FakeHTTPResponse) -> list[dict[str, Any]]:
        calls: list[dict[str, Any]] = []
        queue = list(responses)

        def fake_request(method: str, url: str, **kwargs: Any) -> FakeHTTPResponse:
            calls.append({"method": method, "url": url, **kwargs})
            return queue.pop(0) if len(queue) > 1 else queue[0]

        client.session.request = fake_request
        return calls

    return _install
