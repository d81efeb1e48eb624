from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from influxdriver.errors import ProtocolError
from influxdriver.models import BatchPoints, Point, Response


def test_point_line_protocol_sorts_tags_and_formats_fields():
    p = Point(
        "cpu",
        tags={"region": "us-west", "host": "server01"},
        fields={"value": 0.64, "count": 3, "ok": True, "msg": "hi"},
        time=1422568543702900257,
    )
    assert p.precision_string("ns") == 'cpu,host=server01,region=us-west value=0.64,count=3i,ok=true,msg="hi" 1422568543702900257'


def test_point_escaping():
    p = Point("disk usage", tags={"path": "/var,log", "k=v": "a b"}, fields={"field key": 'say "x" \\ y'})
    assert p.precision_string("ns") == r'disk\ usage,k\=v=a\ b,path=/var\,log field\ key="say \"x\" \\ y"'


def test_point_without_time_has_no_timestamp():
    assert str(Point("m", fields={"v": 1})) == "m v=1i"


def test_empty_tag_values_are_dropped():
    assert str(Point("m", tags={"a": "", "b": "x"}, fields={"v": 1})) == "m,b=x v=1i"


@pytest.mark.parametrize(
    "precision,expected",
    [("ns", "1422568543702900257"), ("u", "1422568543702900"), ("ms", "1422568543702"), ("s", "1422568543"), ("h", "395157")],
)
def test_precision_truncates_timestamp(precision: str, expected: str):
    p = Point("m", fields={"v": 1.5}, time=1422568543702900257)
    assert p.precision_string(precision) == f"m v=1.5 {expected}"


def test_datetime_time_is_converted_to_ns():
    p = Point("m", fields={"v": 1}, time=datetime(2015, 1, 29, 21, 55, 43, 702900, tzinfo=timezone.utc))
    assert p.time_ns == 1422568543702900000
    naive = Point("m", fields={"v": 1}, time=datetime(2015, 1, 29, 21, 55, 43, 702900))
    assert naive.time_ns == p.time_ns


def test_unknown_precision_rejected():
    with pytest.raises(ValueError):
        Point("m", fields={"v": 1}, time=1).precision_string("fortnight")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"measurement": "", "fields": {"v": 1}},
        {"measurement": "m", "fields": {}},
        {"measurement": "m", "fields": {"v": float("nan")}},
        {"measurement": "m", "fields": {"v": float("inf")}},
        {"measurement": "m", "fields": {"v": [1, 2]}},
        {"measurement": "m", "fields": {"v": 2**63}},
        {"measurement": "m", "fields": {"v": -(2**63) - 1}},
        {"measurement": "cpu\nmem", "fields": {"v": 1}},
        {"measurement": "cpu", "tags": {"host": "a\nb"}, "fields": {"v": 1}},
        {"measurement": "cpu", "tags": {"ho\rst": "a"}, "fields": {"v": 1}},
        {"measurement": "cpu", "fields": {"v\n": 1}},
        {"measurement": "cpu", "fields": {"msg": "line one\nline two"}},
    ],
)
def test_invalid_points_rejected(kwargs):
    with pytest.raises(ValueError):
        Point(**kwargs)


def test_int64_bounds_are_accepted():
    p = Point("m", fields={"hi": 2**63 - 1, "lo": -(2**63)}, time=1)
    assert str(p) == f"m hi={2**63 - 1}i,lo={-(2**63)}i 1"


def test_every_point_is_one_line_of_the_batch():
    bp = BatchPoints([
        Point("cpu", tags={"host": "a b"}, fields={"msg": 'say "hi"'}, time=1),
        Point("mem", fields={"v": 1.5}, time=2),
    ])
    assert bp.to_bytes("ns").count(b"\n") == len(bp)


def test_batch_serialization_is_ordered_and_pure():
    bp = BatchPoints()
    a = Point("a", fields={"v": 1}, time=2_000_000_000)
    b = Point("b", fields={"v": 2}, time=3_000_000_000)
    bp.add_point(a)
    bp.add_points([b, a])
    first = bp.to_bytes("s")
    assert first == b"a v=1i 2\nb v=2i 3\na v=1i 2\n"
    assert bp.to_bytes("s") == first
    assert len(bp) == 3
    assert bp.points() == [a, b, a]


def test_empty_batch_serializes_to_nothing():
    assert BatchPoints().to_bytes("ns") == b""


def test_response_decoding_keeps_exact_numbers():
    raw = b"""{"results":[{"statement_id":0,"series":[{"name":"cpu","columns":["time","value"],
        "values":[[1422568543702900257, 0.10000000000000000555], [1422568543702900258, 12345678901234567890]]}]}]}"""
    resp = Response.from_json(raw)
    row = resp.results[0].series[0]
    assert row.name == "cpu"
    assert row.values[0][0] == 1422568543702900257
    assert row.values[0][1] == Decimal("0.10000000000000000555")
    assert row.values[1][1] == 12345678901234567890
    assert resp.error() is None


def test_response_error_prefers_top_level_then_first_statement():
    resp = Response.from_json(b'{"results":[{"error":"first"},{"error":"second"}]}')
    err = resp.error()
    assert isinstance(err, ProtocolError)
    assert str(err) == "first"

    resp = Response.from_json(b'{"results":[{"error":"stmt"}],"error":"top"}')
    assert str(resp.error()) == "top"
    with pytest.raises(ProtocolError, match="top"):
        resp.raise_for_error()


def test_response_messages_are_decoded():
    resp = Response.from_json(b'{"results":[{"messages":[{"level":"warning","text":"deprecated"}]}]}')
    assert resp.results[0].messages[0].level == "warning"
    assert resp.results[0].messages[0].text == "deprecated"
