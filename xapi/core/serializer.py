"""
Statement Serialization

Turns statements (and any of their parts) into JSON-compatible data.

Two views are produced from the same value walk:
- wire form: what a receiving store expects. Nulls omitted.
- debug form: every field, nulls included, as indented text.

VALUE RULES:
1. Pydantic models: own fields plus pass-through extras, in field order
2. Root models (unrecognized parts): the wrapped raw value, verbatim
3. Datetimes: ISO 8601; timezone-aware values converted to UTC, Z suffix
4. Dates: ISO 8601 (YYYY-MM-DD)
5. UUIDs: lowercase string representation
6. Enums: string value (not name)
7. Decimals: JSON numbers
8. Floats: allowed (scores are floats), but NaN/Infinity rejected
9. Tuples: lists
10. Sets and bytes: rejected (no stable JSON form)
"""

import json
import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, RootModel

from .errors import SerializationError


class Serializer:
    """JSON-compatible rendering of statements."""

    @classmethod
    def _serialize_value(cls, value: Any, path: str, keep_none: bool) -> Any:
        """
        Convert a Python value to its JSON-compatible form.

        Raises:
            SerializationError: If the value has no JSON form
        """
        if value is None:
            return None

        # Root model - the raw value it wraps
        if isinstance(value, RootModel):
            return cls._serialize_value(value.root, path, keep_none)

        # Pydantic model - declared fields and extras
        if isinstance(value, BaseModel):
            return cls._serialize_mapping(dict(value), path, keep_none)

        # Enum before str: str-enums are strings too
        if isinstance(value, Enum):
            return value.value

        if isinstance(value, (str, bool, int)):
            return value

        if isinstance(value, float):
            if not math.isfinite(value):
                raise SerializationError(
                    f"Cannot serialize {value} at {path}. "
                    "NaN and Infinity have no JSON representation."
                )
            return value

        if isinstance(value, Decimal):
            if not value.is_finite():
                raise SerializationError(f"Cannot serialize {value} at {path}.")
            return int(value) if value == value.to_integral_value() else float(value)

        if isinstance(value, UUID):
            return str(value).lower()

        if isinstance(value, datetime):
            return cls._serialize_datetime(value)

        if isinstance(value, date):
            return value.strftime("%Y-%m-%d")

        if isinstance(value, Mapping):
            return cls._serialize_mapping(value, path, keep_none)

        if isinstance(value, (list, tuple)):
            return [
                cls._serialize_value(v, f"{path}[{i}]", keep_none)
                for i, v in enumerate(value)
            ]

        if isinstance(value, (bytes, bytearray)):
            raise SerializationError(
                f"Cannot serialize bytes at {path}. "
                "Convert to base64 string first."
            )

        if isinstance(value, (set, frozenset)):
            raise SerializationError(
                f"Cannot serialize set at {path}. "
                "Sets have no stable ordering. Convert to a list first."
            )

        raise SerializationError(
            f"Cannot serialize {type(value).__name__} at {path}. "
            "Only JSON-compatible types are allowed."
        )

    @staticmethod
    def _serialize_datetime(dt: datetime) -> str:
        if dt.tzinfo is None:
            return dt.isoformat()
        utc_dt = dt.astimezone(timezone.utc)
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond:06d}Z"

    @classmethod
    def _serialize_mapping(
        cls,
        data: Mapping[str, Any],
        path: str,
        keep_none: bool,
    ) -> dict[str, Any]:
        result = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise SerializationError(
                    f"Dictionary key at {path} must be string, "
                    f"got {type(key).__name__}"
                )
            key_path = f"{path}.{key}" if path else key
            serialized = cls._serialize_value(value, key_path, keep_none)
            if serialized is not None or keep_none:
                result[key] = serialized
        return result

    @classmethod
    def to_wire(cls, data: Any) -> dict[str, Any]:
        """
        Convert a statement (or mapping) to its wire form.

        Args:
            data: Statement, model or mapping

        Returns:
            JSON-compatible dict with null fields omitted

        Raises:
            SerializationError: If any value has no JSON form
        """
        serialized = cls._serialize_value(data, "", keep_none=False)
        if not isinstance(serialized, dict):
            raise SerializationError(
                f"Wire form requires an object, got {type(data).__name__}."
            )
        return serialized

    @classmethod
    def to_json(cls, data: Any, indent: int | None = None) -> str:
        """Serialize the wire form to a JSON string."""
        return json.dumps(cls.to_wire(data), indent=indent, ensure_ascii=False)

    @classmethod
    def render(cls, data: Any) -> str:
        """
        Render every field (nulls included) as indented JSON text.

        Debug aid only, not the wire form.
        """
        full = cls._serialize_value(data, "", keep_none=True)
        return f"\n{json.dumps(full, indent=2, ensure_ascii=False)}\n"
