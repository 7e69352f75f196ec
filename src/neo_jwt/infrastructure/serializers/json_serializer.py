"""JSON claim serializer.

ONLY JSON serialization - turns header and payload maps into compact JSON
text and back. Non-JSON claim values get a JWT-friendly form: datetimes
become Unix seconds, sets and tuples become arrays.
"""

import json
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Type

from ...core.exceptions import SerializationError
from ...utils import base64url
from ...utils.clock import to_unix_seconds


@dataclass
class JsonSerializerStats:
    """JSON serializer statistics."""

    serialization_count: int = 0
    deserialization_count: int = 0
    total_serialization_time: float = 0.0
    total_deserialization_time: float = 0.0
    error_count: int = 0


class ClaimJSONEncoder(json.JSONEncoder):
    """JSON encoder for claim values that are not native JSON types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return to_unix_seconds(obj)
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return int(obj) if obj == obj.to_integral_value() else float(obj)
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        if isinstance(obj, (bytes, bytearray)):
            return base64url.encode(bytes(obj))
        return super().default(obj)


class JsonClaimSerializer:
    """Compact JSON serializer for JWT segments.

    Output uses ``(",", ":")`` separators and keeps non-ASCII text
    unescaped. NaN and infinity are rejected since they are not JSON.
    """

    def __init__(self, ensure_ascii: bool = False, sort_keys: bool = False):
        """Initialize JSON serializer.

        Args:
            ensure_ascii: If True, escape non-ASCII characters
            sort_keys: Sort dictionary keys
        """
        self._ensure_ascii = ensure_ascii
        self._sort_keys = sort_keys
        self._stats = JsonSerializerStats()
        self._stats_lock = threading.Lock()

    def serialize(self, value: Any) -> str:
        """Serialize a value to compact JSON text."""
        start_time = time.perf_counter()
        try:
            text = json.dumps(
                value,
                cls=ClaimJSONEncoder,
                ensure_ascii=self._ensure_ascii,
                separators=(",", ":"),
                sort_keys=self._sort_keys,
                allow_nan=False,
            )
        except (TypeError, ValueError, OverflowError) as e:
            self._record_error()
            raise SerializationError(
                f"JSON serialization failed: {e}",
                details={"value_type": type(value).__name__},
            ) from e

        elapsed = time.perf_counter() - start_time
        with self._stats_lock:
            self._stats.serialization_count += 1
            self._stats.total_serialization_time += elapsed
        return text

    def deserialize(self, text: str, target_type: Optional[Type] = None) -> Any:
        """Parse JSON text.

        Args:
            text: JSON text
            target_type: If given, the parsed value must be an instance of it

        Raises:
            SerializationError: If the text is not JSON or has the wrong type
        """
        start_time = time.perf_counter()
        try:
            result = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            self._record_error()
            raise SerializationError(f"JSON deserialization failed: {e}") from e

        if target_type is not None and not isinstance(result, target_type):
            self._record_error()
            raise SerializationError(
                f"Expected JSON {target_type.__name__}, got {type(result).__name__}.",
                details={"expected_type": target_type.__name__},
            )

        elapsed = time.perf_counter() - start_time
        with self._stats_lock:
            self._stats.deserialization_count += 1
            self._stats.total_deserialization_time += elapsed
        return result

    def get_format_name(self) -> str:
        return "json"

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get performance statistics."""
        with self._stats_lock:
            return {
                "serialization_count": self._stats.serialization_count,
                "deserialization_count": self._stats.deserialization_count,
                "total_serialization_time": self._stats.total_serialization_time,
                "total_deserialization_time": self._stats.total_deserialization_time,
                "error_count": self._stats.error_count,
            }

    def _record_error(self) -> None:
        with self._stats_lock:
            self._stats.error_count += 1


# Factory function for dependency injection
def create_json_serializer(ensure_ascii: bool = False, sort_keys: bool = False) -> JsonClaimSerializer:
    """Create a JSON claim serializer.

    Args:
        ensure_ascii: If True, escape non-ASCII characters
        sort_keys: Sort dictionary keys

    Returns:
        Configured JSON claim serializer
    """
    return JsonClaimSerializer(ensure_ascii=ensure_ascii, sort_keys=sort_keys)
