"""
JSON serialization for stored values

Stored payloads are UTF-8 JSON, schema-free and unversioned. Values are
converted with pydantic's JSON mode first, so models (top-level or nested),
datetimes, UUIDs and sets are written the same way pydantic writes them.
Reads can be validated back into any type pydantic's TypeAdapter understands.
"""

import json
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError, to_jsonable_python

from core.errors import InvalidOperationError, ItemParsingError

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


def to_json_bytes(value: Any) -> bytes:
    """
    Serialize value to UTF-8 JSON

    Raises:
        InvalidOperationError: Value is not JSON-serializable (includes NaN/inf)
    """
    try:
        jsonable = to_jsonable_python(value)
        return json.dumps(jsonable, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise InvalidOperationError("serialize object", e) from e


def from_json_bytes(data: bytes, model: type[T] | None = None) -> T | Any:
    """
    Parse UTF-8 JSON, optionally validating into model

    Args:
        data: Raw object body
        model: Target type (pydantic model, dataclass, list[int], ...);
            None returns plain JSON values

    Raises:
        ItemParsingError: Body is not UTF-8 JSON, or does not match model
    """
    try:
        text = data.decode("utf-8")
        if model is None:
            return json.loads(text)
        return TypeAdapter(model).validate_json(text)
    except ValueError as e:
        # UnicodeDecodeError, JSONDecodeError and pydantic ValidationError
        raise ItemParsingError("deserialize object", e) from e
