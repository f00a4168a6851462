"""Configuration module: frozen dataclass loaded from env vars or a YAML file."""

import functools
import os
import sys
from dataclasses import dataclass, fields

import yaml

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "3001"
DEFAULT_SURROUND = 3


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_timeout(value: str | None) -> float | None:
    if value is None or value.strip().lower() in ("", "none"):
        return None
    return float(value)


def detect_debug_info() -> bool:
    """Return False when the interpreter runs with optimizations (``python -O``)."""
    return __debug__ and sys.flags.optimize == 0


@dataclass(frozen=True)
class CaptureConfig:
    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    surround: int = DEFAULT_SURROUND
    timeout: float | None = None
    debug_info: bool = True
    address: str = ""


def load_config() -> CaptureConfig:
    """Build CaptureConfig from environment variables.

    Only the build-mode flag, the send deadline and the origin address come
    from the environment. Host, port and surround are call-site parameters.
    """
    debug_env = os.environ.get("CODECTRL_DEBUG_INFO")
    return CaptureConfig(
        timeout=_parse_timeout(os.environ.get("CODECTRL_TIMEOUT")),
        debug_info=(
            _parse_bool(debug_env) if debug_env is not None else detect_debug_info()
        ),
        address=os.environ.get("CODECTRL_ADDRESS", CaptureConfig.address),
    )


def load_config_file(path: str) -> CaptureConfig:
    """Load CaptureConfig from a YAML mapping; missing keys keep their defaults."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(CaptureConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    kwargs: dict = {"debug_info": detect_debug_info()}
    if "host" in data:
        kwargs["host"] = str(data["host"])
    if "port" in data:
        kwargs["port"] = str(data["port"])
    if "surround" in data:
        kwargs["surround"] = int(data["surround"])
    if "timeout" in data:
        timeout = data["timeout"]
        kwargs["timeout"] = None if timeout is None else float(timeout)
    if "debug_info" in data:
        value = data["debug_info"]
        kwargs["debug_info"] = (
            _parse_bool(value) if isinstance(value, str) else bool(value)
        )
    if "address" in data:
        kwargs["address"] = str(data["address"])

    return CaptureConfig(**kwargs)


@functools.lru_cache(maxsize=1)
def default_config() -> CaptureConfig:
    """Process-wide config, resolved from the environment on first use."""
    return load_config()
