"""Environment settings, backend addresses, SDK constants and event helpers."""

from __future__ import annotations

import base64
import dataclasses
import enum
import inspect
import json
import re
from typing import Any
from urllib.parse import urlsplit

TYPE_PRD = "prd"
# Kept for compatibility; every environment uses the production backend by default.
TYPE_TEST = "test"

DEFAULT_ADDR_PRD = "https://cache.example.com"
DEFAULT_ADDR_TEST = "https://cache.example.com"

DEFAULT_DMP_ADDR_PRD = "https://openapi.example.com"
DEFAULT_DMP_ADDR_TEST = "https://openapi.example.com"

# Returned when no experiment is hit. Prefer ``Group.is_default``.
DEFAULT_GLOBAL_GROUP_ID = -1
DEFAULT_GLOBAL_GROUP_KEY = "defaultSystemGroupKey"

PROJECT_ID_NOT_FOUND = 1001
INVALID_GROUP_ID = 1002

SDK_VERSION = "GO_SDK_v0.1.6"
SDK_TYPE = "GO"
VERSION = "v0.1.6"

# SOCKS5 proxy addresses; they take effect only when set before initialisation.
CACHE_SERVER_SOCKS5_ADDR = ""
DMP_SERVER_SOCKS5_ADDR = ""

_addr_index: dict[str, str] = {
    TYPE_PRD: DEFAULT_ADDR_PRD,
    TYPE_TEST: DEFAULT_ADDR_TEST,
}

_dmp_addr_index: dict[str, str] = {
    TYPE_PRD: DEFAULT_DMP_ADDR_PRD,
    TYPE_TEST: DEFAULT_DMP_ADDR_TEST,
}

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class MonitorEventStatus(enum.Enum):
    """Outcome recorded on a monitor event."""

    SUCCESS = "STATUS_SUCCESS"
    UNEXPECTED = "STATUS_UNEXPECTED"


class ParamKeyNotFoundError(LookupError):
    """An experiment or configuration parameter key does not exist."""

    def __init__(self, message: str = "param key not found") -> None:
        super().__init__(message)


def _validate_url(addr: str) -> None:
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in addr):
        raise ValueError(f"invalid control character in URL: {addr!r}")
    if addr.startswith(":"):
        raise ValueError(f"missing protocol scheme: {addr!r}")
    if _BAD_ESCAPE.search(addr):
        raise ValueError(f"invalid URL escape: {addr!r}")
    # Accessing the port validates it.
    urlsplit(addr).port


def register_addr(env_type: str, addr: str) -> None:
    """Register the cache backend address for an environment."""
    _validate_url(addr)
    _addr_index[env_type] = addr


def get_addr(env_type: str) -> str:
    """Return the cache backend address, falling back to production."""
    return _addr_index.get(env_type, _addr_index[TYPE_PRD])


def register_dmp_addr(env_type: str, addr: str) -> None:
    """Register the DMP backend address for an environment."""
    _validate_url(addr)
    _dmp_addr_index[env_type] = addr


def get_dmp_addr(env_type: str) -> str:
    """Return the DMP backend address, falling back to production."""
    return _dmp_addr_index.get(env_type, _dmp_addr_index[TYPE_PRD])


def invoke_path(skip: int) -> str:
    """Return ``file:line`` of the frame ``skip`` levels up; ``":0"`` if none."""
    frame = inspect.currentframe()
    try:
        for _ in range(skip):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return ":0"
        return f"{frame.f_code.co_filename}:{frame.f_lineno}"
    finally:
        del frame


def sampling_interval(config: Any, err: BaseException | None) -> int:
    """Pick the error or normal sampling interval of a metrics config."""
    if err is not None:
        return config.err_sampling_interval
    return config.sampling_interval


def err_msg(err: BaseException | None) -> str:
    """Return the error message, or an empty string."""
    return "" if err is None else str(err)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


def json_string(source: Any) -> str:
    """Serialise to compact, HTML-safe JSON; empty string on None or failure."""
    if source is None:
        return ""
    try:
        text = json.dumps(
            source, default=_json_default, separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError):
        return ""
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def event_status(err: BaseException | None) -> MonitorEventStatus:
    """Map an error to a monitor event status."""
    if err is not None:
        return MonitorEventStatus.UNEXPECTED
    return MonitorEventStatus.SUCCESS