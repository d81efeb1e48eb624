from __future__ import annotations

import pytest

from influxdriver import config


def test_get_dsn_default_and_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("INFLUXDRIVER_DSN", raising=False)
    assert config.get_dsn() == config.DEFAULT_DSN
    monkeypatch.setenv("INFLUXDRIVER_DSN", "udp://10.0.0.1:8089")
    assert config.get_dsn() == "udp://10.0.0.1:8089"


def test_udp_payload_size_falls_back_on_bad_values(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("INFLUXDRIVER_UDP_PAYLOAD_SIZE", "1400")
    assert config.get_udp_payload_size() == 1400
    monkeypatch.setenv("INFLUXDRIVER_UDP_PAYLOAD_SIZE", "lots")
    assert config.get_udp_payload_size() == config.DEFAULT_UDP_PAYLOAD_SIZE
    monkeypatch.setenv("INFLUXDRIVER_UDP_PAYLOAD_SIZE", "-5")
    assert config.get_udp_payload_size() == config.DEFAULT_UDP_PAYLOAD_SIZE


def test_get_env_default_only_when_unset(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("INFLUXDRIVER_SOMETHING", raising=False)
    assert config.get_env("INFLUXDRIVER_SOMETHING", "fallback") == "fallback"
    monkeypatch.setenv("INFLUXDRIVER_SOMETHING", "")
    assert config.get_env("INFLUXDRIVER_SOMETHING", "fallback") == ""


def test_ping_wait_never_negative(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("INFLUXDRIVER_PING_WAIT_S", "-3")
    assert config.get_ping_wait_s() == 0.0
    monkeypatch.setenv("INFLUXDRIVER_PING_WAIT_S", "2.5")
    assert config.get_ping_wait_s() == 2.5
