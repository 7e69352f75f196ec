"""Claim value object with typed access.

Claims arrive from JSON and are dynamically typed. ClaimValue tags each
value with its JSON shape so typed reads are explicit about which
conversions they allow.
"""

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple, Type


class ClaimKind(str, Enum):
    """JSON shape of a claim value."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    RAW_JSON = "raw_json"


_NOT_CONVERTIBLE = object()


@dataclass(frozen=True)
class ClaimValue:
    """Tagged claim value.

    ``RAW_JSON`` holds values of an unknown shape as their JSON text; they
    can still be read back as text or re-parsed on a typed read.
    """

    kind: ClaimKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> "ClaimValue":
        """Tag a plain Python value with its JSON kind."""
        if value is None:
            return cls(ClaimKind.NULL, None)
        if isinstance(value, bool):
            return cls(ClaimKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ClaimKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ClaimKind.STRING, value)
        if isinstance(value, dict):
            return cls(ClaimKind.OBJECT, value)
        if isinstance(value, (list, tuple)):
            return cls(ClaimKind.ARRAY, list(value))
        return cls(ClaimKind.RAW_JSON, json.dumps(value, default=str, separators=(",", ":")))

    @property
    def is_complex(self) -> bool:
        return self.kind in (ClaimKind.OBJECT, ClaimKind.ARRAY)

    def as_text(self) -> str:
        """Text form: scalars as written, objects and arrays as compact JSON."""
        if self.kind == ClaimKind.NULL:
            return ""
        if self.kind == ClaimKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind == ClaimKind.NUMBER:
            if isinstance(self.value, float) and self.value.is_integer():
                return str(int(self.value))
            return str(self.value)
        if self.is_complex:
            return json.dumps(self.value, separators=(",", ":"), ensure_ascii=False)
        return self.value

    def to_python(self) -> Any:
        """Plain Python value (RAW_JSON is parsed back when possible)."""
        if self.kind == ClaimKind.RAW_JSON:
            try:
                return json.loads(self.value)
            except ValueError:
                return self.value
        return self.value

    def try_convert(self, expected_type: Optional[Type]) -> Tuple[bool, Any]:
        """Convert to ``expected_type``.

        Args:
            expected_type: Target type, or None for the plain value

        Returns:
            Tuple of (converted, value)
        """
        if expected_type is None or expected_type is object:
            return True, self.to_python()

        converter = _CONVERTERS.get(expected_type)
        if converter is None:
            value = self.to_python()
            return (True, value) if isinstance(value, expected_type) else (False, None)

        result = converter(self)
        if result is _NOT_CONVERTIBLE:
            return False, None
        return True, result


def _to_str(claim: ClaimValue) -> Any:
    return claim.as_text()


def _to_int(claim: ClaimValue) -> Any:
    if claim.kind == ClaimKind.NUMBER:
        value = claim.value
        if isinstance(value, float):
            if not math.isfinite(value) or not value.is_integer():
                return _NOT_CONVERTIBLE
            return int(value)
        return value
    if claim.kind == ClaimKind.STRING:
        try:
            return int(claim.value.strip())
        except ValueError:
            return _NOT_CONVERTIBLE
    return _NOT_CONVERTIBLE


def _to_float(claim: ClaimValue) -> Any:
    if claim.kind == ClaimKind.NUMBER:
        return float(claim.value)
    if claim.kind == ClaimKind.STRING:
        try:
            return float(claim.value.strip())
        except ValueError:
            return _NOT_CONVERTIBLE
    return _NOT_CONVERTIBLE


def _to_bool(claim: ClaimValue) -> Any:
    if claim.kind == ClaimKind.BOOLEAN:
        return claim.value
    if claim.kind == ClaimKind.STRING and claim.value.lower() in ("true", "false"):
        return claim.value.lower() == "true"
    return _NOT_CONVERTIBLE


def _parse_json_text(claim: ClaimValue) -> Any:
    if claim.kind not in (ClaimKind.STRING, ClaimKind.RAW_JSON):
        return _NOT_CONVERTIBLE
    try:
        return json.loads(claim.value)
    except ValueError:
        return _NOT_CONVERTIBLE


def _to_dict(claim: ClaimValue) -> Any:
    if claim.kind == ClaimKind.OBJECT:
        return claim.value
    parsed = _parse_json_text(claim)
    return parsed if isinstance(parsed, dict) else _NOT_CONVERTIBLE


def _to_list(claim: ClaimValue) -> Any:
    if claim.kind == ClaimKind.ARRAY:
        return claim.value
    parsed = _parse_json_text(claim)
    return parsed if isinstance(parsed, list) else _NOT_CONVERTIBLE


def _to_datetime(claim: ClaimValue) -> Any:
    seconds = _to_int(claim)
    if seconds is _NOT_CONVERTIBLE:
        return _NOT_CONVERTIBLE
    try:
        return datetime.fromtimestamp(seconds, timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _NOT_CONVERTIBLE


_CONVERTERS = {
    str: _to_str,
    int: _to_int,
    float: _to_float,
    bool: _to_bool,
    dict: _to_dict,
    list: _to_list,
    datetime: _to_datetime,
}
