"""
Data model: points and batches (write side), queries and responses (read side).

Points are rendered in line protocol:

    measurement[,tag=value...] field=value[,field=value...] [timestamp]
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from influxdriver.errors import ProtocolError
from influxdriver.util.time import datetime_to_ns, precision_multiplier

FieldValue = bool | int | float | Decimal | str

_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ "})
_KEY_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ "})
_STRING_FIELD_ESCAPES = str.maketrans({'"': r"\"", "\\": r"\\"})

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _check_single_line(what: str, text: str) -> None:
    # A point is exactly one line of the payload.
    if "\n" in text or "\r" in text:
        raise ValueError(f"{what} must not contain line breaks: {text!r}")


def _format_field_value(value: FieldValue) -> str:
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Decimal):
        return str(value)
    return '"' + value.translate(_STRING_FIELD_ESCAPES) + '"'


class Point:
    """
    A single data point.

    `time` may be None (the server assigns its receive time), epoch nanoseconds
    as an int, or a datetime (naive datetimes are taken as UTC).
    """

    def __init__(
        self,
        measurement: str,
        tags: Mapping[str, str] | None = None,
        fields: Mapping[str, FieldValue] | None = None,
        time: datetime | int | None = None,
    ) -> None:
        if not measurement:
            raise ValueError("point measurement must not be empty")
        _check_single_line("measurement", measurement)
        if not fields:
            raise ValueError(f"point {measurement!r} has no fields")
        for key, value in fields.items():
            if not key:
                raise ValueError(f"point {measurement!r} has an empty field key")
            _check_single_line("field key", key)
            if not isinstance(value, (bool, int, float, Decimal, str)):
                raise ValueError(f"field {key!r} has unsupported type {type(value).__name__}")
            if (isinstance(value, float) and not math.isfinite(value)) or (isinstance(value, Decimal) and not value.is_finite()):
                raise ValueError(f"field {key!r} is not a finite number")
            if isinstance(value, int) and not isinstance(value, bool) and not INT64_MIN <= value <= INT64_MAX:
                raise ValueError(f"field {key!r} is outside the 64-bit integer range")
            if isinstance(value, str):
                _check_single_line(f"field {key!r}", value)
        self.measurement = measurement
        self.tags = {str(k): str(v) for k, v in (tags or {}).items() if k and v}
        for k, v in self.tags.items():
            _check_single_line("tag key", k)
            _check_single_line(f"tag {k!r}", v)
        self.fields = dict(fields)
        if isinstance(time, datetime):
            self.time_ns: int | None = datetime_to_ns(time)
        elif time is None:
            self.time_ns = None
        else:
            self.time_ns = int(time)

    def key(self) -> str:
        parts = [self.measurement.translate(_MEASUREMENT_ESCAPES)]
        for k in sorted(self.tags):
            parts.append(f"{k.translate(_KEY_ESCAPES)}={self.tags[k].translate(_KEY_ESCAPES)}")
        return ",".join(parts)

    def fields_string(self) -> str:
        return ",".join(
            f"{k.translate(_KEY_ESCAPES)}={_format_field_value(v)}" for k, v in self.fields.items()
        )

    def precision_string(self, precision: str) -> str:
        """Line-protocol text with the timestamp truncated to `precision` units."""
        mult = precision_multiplier(precision)
        line = f"{self.key()} {self.fields_string()}"
        if self.time_ns is None:
            return line
        # Truncate toward zero, matching integer division on the server side.
        ts = abs(self.time_ns) // mult
        return f"{line} {-ts if self.time_ns < 0 else ts}"

    def __str__(self) -> str:
        return self.precision_string("ns")

    def __repr__(self) -> str:
        return f"Point({self.precision_string('ns')!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return str(self) == str(other)


class BatchPoints:
    """Ordered, append-only collection of points. Serializing never mutates it."""

    def __init__(self, points: Iterable[Point] | None = None) -> None:
        self._points: list[Point] = list(points or [])

    def add_point(self, p: Point) -> None:
        self._points.append(p)

    def add_points(self, ps: Iterable[Point]) -> None:
        self._points.extend(ps)

    def points(self) -> list[Point]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def to_bytes(self, precision: str = "ns") -> bytes:
        return "".join(p.precision_string(precision) + "\n" for p in self._points).encode("utf-8")


@dataclass(frozen=True)
class WriteConfig:
    """Target and options for a write request. Empty strings mean "not sent"."""

    database: str = ""
    precision: str = ""
    retention_policy: str = ""
    consistency: str = ""


@dataclass(frozen=True)
class Query:
    """A statement plus the database and epoch precision it runs against."""

    command: str
    database: str = ""
    precision: str = ""


@dataclass
class Row:
    name: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    columns: list[str] = field(default_factory=list)
    values: list[list[Any]] = field(default_factory=list)
    partial: bool = False

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Row":
        return cls(
            name=str(d.get("name") or ""),
            tags=dict(d.get("tags") or {}),
            columns=list(d.get("columns") or []),
            values=[list(v) for v in (d.get("values") or [])],
            partial=bool(d.get("partial", False)),
        )


@dataclass(frozen=True)
class Message:
    level: str
    text: str


@dataclass
class Result:
    """Result set returned for a single statement."""

    series: list[Row] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    error: str = ""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Result":
        return cls(
            series=[Row.from_dict(r) for r in (d.get("series") or [])],
            messages=[Message(level=str(m.get("level", "")), text=str(m.get("text", ""))) for m in (d.get("messages") or [])],
            error=str(d.get("error") or ""),
        )


@dataclass
class Response:
    """All statement results for one query request, plus an optional top-level error."""

    results: list[Result] = field(default_factory=list)
    err: str = ""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Response":
        if not isinstance(d, Mapping):
            raise ValueError(f"expected a JSON object, got {type(d).__name__}")
        return cls(
            results=[Result.from_dict(r) for r in (d.get("results") or [])],
            err=str(d.get("error") or ""),
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "Response":
        """
        Decode a query response body.

        Non-integer numbers decode to Decimal so timestamps and large values keep
        their exact text.
        """
        return cls.from_dict(json.loads(raw, parse_float=Decimal))

    def error(self) -> ProtocolError | None:
        """The top-level error, else the first statement error, else None."""
        if self.err:
            return ProtocolError(self.err)
        for result in self.results:
            if result.error:
                return ProtocolError(result.error)
        return None

    def raise_for_error(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "results": [
                {
                    "series": [
                        {"name": r.name, "tags": r.tags, "columns": r.columns, "values": r.values, "partial": r.partial}
                        for r in res.series
                    ],
                    "messages": [{"level": m.level, "text": m.text} for m in res.messages],
                    "error": res.error,
                }
                for res in self.results
            ]
        }
        if self.err:
            out["error"] = self.err
        return out
