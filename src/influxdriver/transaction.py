"""
Transaction shim over a write-only batch.

A transaction only batches points added through add_point/add_points.
INSERT statements executed on the connection while a transaction is open
still write straight through and never land in the batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

import structlog

from influxdriver.errors import TransactionError
from influxdriver.models import BatchPoints, Point, WriteConfig

if TYPE_CHECKING:
    from influxdriver.driver import Connection

log = structlog.get_logger()

COMMIT_PRECISION = "ns"


class Transaction:
    def __init__(self, conn: "Connection") -> None:
        self.conn = conn
        self.batch = BatchPoints()
        self._done = False

    @property
    def closed(self) -> bool:
        return self._done

    def _check_open(self) -> None:
        if self._done:
            raise TransactionError("transaction already finished")

    def add_point(self, p: Point) -> None:
        with self.conn.lock:
            self._check_open()
            self.batch.add_point(p)

    def add_points(self, ps: Iterable[Point]) -> None:
        with self.conn.lock:
            self._check_open()
            self.batch.add_points(ps)

    def commit(self) -> None:
        """
        Write the batch to the connection's database in one request.

        The transaction is finished whatever the outcome; a failed commit is
        not retryable.
        """
        with self.conn.lock:
            self._check_open()
            # Finished before the write; a nested commit from inside write() must fail.
            self._done = True
            data = self.batch.to_bytes(COMMIT_PRECISION)
            try:
                self.conn.client.write(data, WriteConfig(database=self.conn.database, precision=COMMIT_PRECISION))
            except Exception as e:
                log.warning("driver.tx_commit_failed", db=self.conn.database, points=len(self.batch), error=str(e))
                raise
            else:
                log.debug("driver.tx_commit", db=self.conn.database, points=len(self.batch))
            finally:
                self.conn._release(self)

    def rollback(self) -> None:
        """Discard the batch. No network I/O."""
        with self.conn.lock:
            self._check_open()
            log.debug("driver.tx_rollback", db=self.conn.database, points=len(self.batch))
            self.batch = BatchPoints()
            self._done = True
            self.conn._release(self)

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if self._done:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
