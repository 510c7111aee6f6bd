"""Experiment groups and the results returned by experiment assignment."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from abcsdk.env import ParamKeyNotFoundError

if TYPE_CHECKING:
    from abcsdk.user import UserContext

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INF_LITERALS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class _OutOfRangeError(ValueError):
    """A number parsed but does not fit; ``value`` holds the clamped result."""

    def __init__(self, message: str, value: Any) -> None:
        super().__init__(message)
        self.value = value


def _parse_bool(text: str) -> bool:
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"invalid boolean syntax: {text!r}")


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer syntax: {text!r}")
    value = int(text)
    if value > _INT64_MAX:
        raise _OutOfRangeError(f"integer out of range: {text!r}", _INT64_MAX)
    if value < _INT64_MIN:
        raise _OutOfRangeError(f"integer out of range: {text!r}", _INT64_MIN)
    return value


def _parse_float(text: str) -> float:
    if not text or "_" in text or any(ch.isspace() for ch in text):
        raise ValueError(f"invalid float syntax: {text!r}")
    lowered = text.lower()
    unsigned = lowered.lstrip("+-")
    if unsigned.startswith("0x"):
        if "p" not in unsigned:
            raise ValueError(f"invalid float syntax: {text!r}")
        value = float.fromhex(text)
    else:
        value = float(text)
    if math.isinf(value) and lowered not in _INF_LITERALS:
        raise _OutOfRangeError(f"float out of range: {text!r}", value)
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON value: {name}")


def _parse_json_map(text: str) -> dict[str, Any] | None:
    result = json.loads(text, parse_constant=_reject_constant)
    if result is None:
        return None
    if not isinstance(result, dict):
        raise ValueError("JSON value is not an object")
    return result


class Group:
    """An experiment group with typed access to its parameters."""

    def __init__(
        self,
        id: int = 0,
        key: str = "",
        experiment_key: str = "",
        layer_key: str = "",
        is_default: bool = False,
        is_control: bool = False,
        is_override_list: bool = False,
        params: dict[str, str] | None = None,
        scene_ids: list[int] | None = None,
        unit_id_type: int = 0,
        holdout_data: dict[str, Group] | None = None,
    ) -> None:
        self.id = id
        self.key = key
        self.experiment_key = experiment_key
        self.layer_key = layer_key
        self.is_default = is_default
        self.is_control = is_control
        self.is_override_list = is_override_list
        self.unit_id_type = unit_id_type
        self.holdout_data = holdout_data
        self._params: dict[str, str] = dict(params) if params else {}
        self._scene_ids: list[int] = list(scene_ids) if scene_ids else []

    def _fields(self) -> tuple:
        return (
            self.id,
            self.key,
            self.experiment_key,
            self.layer_key,
            self.is_default,
            self.is_control,
            self.is_override_list,
            self._params,
            self._scene_ids,
            self.unit_id_type,
            self.holdout_data or {},
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Group(id={self.id!r}, key={self.key!r}, "
            f"experiment_key={self.experiment_key!r}, layer_key={self.layer_key!r}, "
            f"is_default={self.is_default!r}, is_control={self.is_control!r}, "
            f"is_override_list={self.is_override_list!r}, params={self._params!r}, "
            f"scene_ids={self._scene_ids!r}, unit_id_type={self.unit_id_type!r})"
        )

    def scene_id_list(self) -> list[int] | None:
        """Return a copy of the scene IDs, or None when there are none."""
        return list(self._scene_ids) if self._scene_ids else None

    def params(self) -> dict[str, str]:
        """Return a copy of the group's parameters."""
        return dict(self._params)

    def _lookup(self, key: str) -> str:
        try:
            return self._params[key]
        except KeyError:
            raise ParamKeyNotFoundError() from None

    def get_bool(self, key: str) -> bool:
        """Parse a parameter as a boolean."""
        return _parse_bool(self._lookup(key))

    def get_int(self, key: str) -> int:
        """Parse a parameter as a signed 64-bit integer."""
        return _parse_int(self._lookup(key))

    def get_float(self, key: str) -> float:
        """Parse a parameter as a float."""
        return _parse_float(self._lookup(key))

    def get_json_map(self, key: str) -> dict[str, Any] | None:
        """Parse a parameter as a JSON object; ``null`` gives None."""
        return _parse_json_map(self._lookup(key))

    def get_string(self, key: str) -> str:
        """Return a parameter as a string."""
        return self._lookup(key)

    def get_bytes(self, key: str) -> bytes | None:
        """Return a parameter as bytes, or None when the key is missing."""
        source = self._params.get(key)
        return None if source is None else source.encode("utf-8")

    def must_get_bytes(self, key: str) -> bytes:
        """Return a parameter as bytes, empty when the key is missing."""
        return self._params.get(key, "").encode("utf-8")

    def get_bool_with_default(self, key: str, default: bool) -> bool:
        try:
            return self.get_bool(key)
        except (LookupError, ValueError):
            return default

    def get_int_with_default(self, key: str, default: int) -> int:
        try:
            return self.get_int(key)
        except (LookupError, ValueError):
            return default

    def get_float_with_default(self, key: str, default: float) -> float:
        try:
            return self.get_float(key)
        except (LookupError, ValueError):
            return default

    def get_json_map_with_default(
        self, key: str, default: dict[str, Any] | None
    ) -> dict[str, Any] | None:
        try:
            return self.get_json_map(key)
        except (LookupError, ValueError):
            return default

    def get_string_with_default(self, key: str, default: str) -> str:
        try:
            return self.get_string(key)
        except LookupError:
            return default

    def must_get_bool(self, key: str) -> bool:
        return self.get_bool_with_default(key, False)

    def must_get_int(self, key: str) -> int:
        """Return the integer, the clamped bound on overflow, or 0 on error."""
        try:
            return self.get_int(key)
        except _OutOfRangeError as exc:
            return exc.value
        except (LookupError, ValueError):
            return 0

    def must_get_float(self, key: str) -> float:
        """Return the float, infinity on overflow, or 0.0 on error."""
        try:
            return self.get_float(key)
        except _OutOfRangeError as exc:
            return exc.value
        except (LookupError, ValueError):
            return 0.0

    def must_get_json_map(self, key: str) -> dict[str, Any] | None:
        return self.get_json_map_with_default(key, None)

    def must_get_string(self, key: str) -> str:
        return self.get_string_with_default(key, "")


@dataclass
class ExperimentList:
    """Groups hit by a unit, keyed by layer key."""

    data: dict[str, Group] = field(default_factory=dict)
    user_context: UserContext | None = None


@dataclass
class ExperimentResult:
    """A single assignment; attribute access falls through to the group."""

    group: Group | None = None
    user_context: UserContext | None = None

    def __getattr__(self, name: str) -> Any:
        if name in ("group", "user_context") or name.startswith("__"):
            raise AttributeError(name)
        group = self.__dict__.get("group")
        if group is None:
            raise AttributeError(name)
        return getattr(group, name)