"""
Configuration: environment-driven defaults for the CLI and library helpers.

Loads configuration from:
1. Environment variables
2. .env file (if present, via python-dotenv)

Usage:
    from influxdriver.config import load_config, get_dsn

    # At CLI startup
    load_config()

    dsn = get_dsn()
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

log = structlog.get_logger()

DEFAULT_DSN = "http://127.0.0.1:8086/"
DEFAULT_UDP_PAYLOAD_SIZE = 512

# Flag to track if config has been loaded
_config_loaded = False


def find_dotenv() -> Path | None:
    """Find the .env file, searching up from current directory."""
    current = Path.cwd()
    for _ in range(10):  # Max 10 levels up
        env_file = current / ".env"
        if env_file.exists():
            return env_file
        if current.parent == current:
            break
        current = current.parent

    return None


def load_config() -> None:
    """
    Load configuration from .env file if present.

    Should be called once at CLI startup.
    """
    global _config_loaded
    if _config_loaded:
        return

    # Tests control the environment explicitly; a developer's local `.env` would make them flaky.
    if os.environ.get("PYTEST_CURRENT_TEST") or str(os.environ.get("INFLUXDRIVER_DISABLE_DOTENV", "")).lower() in {"1", "true", "yes"}:
        log.debug("config.skip_dotenv", reason="pytest_or_disabled")
        _config_loaded = True
        return

    try:
        from dotenv import load_dotenv

        env_file = find_dotenv()
        if env_file:
            load_dotenv(env_file, override=False)
            log.debug("config.loaded_dotenv", path=str(env_file))
        else:
            log.debug("config.no_dotenv_found")
    except ImportError:
        log.debug("config.dotenv_not_installed")

    _config_loaded = True


def get_env(key: str, default: str | None = None) -> str | None:
    """Get an environment variable, or `default` when unset."""
    return os.environ.get(key, default)


def env_int(key: str, default: int) -> int:
    """Read an integer environment variable with safe fallback."""
    load_config()
    try:
        return int(get_env(key, str(int(default))) or int(default))
    except Exception:
        return int(default)


def env_float(key: str, default: float) -> float:
    """Read a float environment variable with safe fallback."""
    load_config()
    try:
        return float(get_env(key, str(float(default))) or float(default))
    except Exception:
        return float(default)


# ---------------------------------------------------------------------------
# Connection defaults
# ---------------------------------------------------------------------------


def get_dsn() -> str:
    load_config()
    return str(get_env("INFLUXDRIVER_DSN", DEFAULT_DSN) or DEFAULT_DSN)


def get_user_agent() -> str:
    load_config()
    return str(get_env("INFLUXDRIVER_USER_AGENT", "") or "")


def get_udp_payload_size() -> int:
    v = env_int("INFLUXDRIVER_UDP_PAYLOAD_SIZE", DEFAULT_UDP_PAYLOAD_SIZE)
    return v if v > 0 else DEFAULT_UDP_PAYLOAD_SIZE


def get_ping_wait_s() -> float:
    return max(0.0, env_float("INFLUXDRIVER_PING_WAIT_S", 0.0))
