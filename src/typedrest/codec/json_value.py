"""
JSON text <-> JsonValue conversion.

JsonValue is a closed set of frozen variants so consumers branch on shape
explicitly instead of poking at untyped dicts. Everything here is pure and
synchronous.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from typedrest.errors import DecodeError


@dataclass(frozen=True)
class JsonNull:
    pass


@dataclass(frozen=True)
class JsonBool:
    value: bool


@dataclass(frozen=True)
class JsonNumber:
    value: Union[int, float]


@dataclass(frozen=True)
class JsonString:
    value: str


@dataclass(frozen=True)
class JsonArray:
    items: tuple["JsonValue", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class JsonObject:
    fields: dict[str, "JsonValue"] = field(default_factory=dict)

    def get(self, key: str) -> "JsonValue | None":
        return self.fields.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.fields


JsonValue = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]


def from_python(obj: Any) -> JsonValue:
    """Lift plain Python data (as produced by json.loads) into a JsonValue tree."""
    if obj is None:
        return JsonNull()
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return JsonBool(obj)
    if isinstance(obj, (int, float)):
        return JsonNumber(obj)
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(from_python(x) for x in obj))
    if isinstance(obj, dict):
        return JsonObject({str(k): from_python(v) for k, v in obj.items()})
    raise TypeError(f"not representable as JSON: {type(obj).__name__}")


def to_python(value: JsonValue) -> Any:
    if isinstance(value, JsonNull):
        return None
    if isinstance(value, (JsonBool, JsonNumber, JsonString)):
        return value.value
    if isinstance(value, JsonArray):
        return [to_python(x) for x in value.items]
    if isinstance(value, JsonObject):
        return {k: to_python(v) for k, v in value.fields.items()}
    raise TypeError(f"not a JsonValue: {type(value).__name__}")


def _reject_constant(name: str) -> Any:
    raise DecodeError(f"malformed JSON: {name} is not a JSON value")


def decode(text: str) -> JsonValue:
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
        return from_python(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise DecodeError(f"malformed JSON: {e}") from e
    except RecursionError as e:
        raise DecodeError("malformed JSON: nesting too deep") from e


def encode(value: JsonValue) -> str:
    """Raises ValueError for NaN / infinite numbers, which JSON cannot carry."""
    return json.dumps(to_python(value), ensure_ascii=False, allow_nan=False)


def type_name(value: JsonValue) -> str:
    return {
        JsonNull: "null",
        JsonBool: "bool",
        JsonNumber: "number",
        JsonString: "string",
        JsonArray: "array",
        JsonObject: "object",
    }[type(value)]
