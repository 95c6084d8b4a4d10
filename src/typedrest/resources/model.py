from __future__ import annotations

from typing import Any, ClassVar, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from typedrest.codec.json_value import (
    JsonArray,
    JsonObject,
    JsonValue,
    from_python,
    to_python,
    type_name,
)
from typedrest.errors import DecodeError

R = TypeVar("R", bound="Resource")

# pydantic error type -> expected JSON type, for readable DecodeErrors
_EXPECTED = {
    "int_type": "integer",
    "int_parsing": "integer",
    "float_type": "number",
    "string_type": "string",
    "bool_type": "boolean",
    "list_type": "array",
    "dict_type": "object",
    "model_type": "object",
}


class Resource(BaseModel):
    """
    Base for a domain record exposed by the remote API.

    Subclasses declare fields with camelCase aliases matching the wire format
    and set `collection` to the path segment they live under.
    Validation is strict: "1" is not an int.
    """

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True, extra="ignore")

    collection: ClassVar[str] = ""

    @classmethod
    def from_json(cls: Type[R], value: JsonValue) -> R:
        if not isinstance(value, JsonObject):
            raise DecodeError(
                f"expected object for {cls.__name__}, got {type_name(value)}",
                expected="object",
            )
        try:
            return cls.model_validate(to_python(value))
        except ValidationError as e:
            raise _decode_error_from(cls, e) from e

    def to_json(self) -> JsonObject:
        dumped = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        return JsonObject({k: from_python(v) for k, v in dumped.items()})


def _decode_error_from(model: Type[Resource], exc: ValidationError) -> DecodeError:
    err: dict[str, Any] = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or None
    etype = err.get("type", "")
    if etype == "missing":
        return DecodeError(
            f"{model.__name__}: missing required field {loc!r}",
            field=loc,
        )
    expected = _EXPECTED.get(etype, etype)
    return DecodeError(
        f"{model.__name__}: field {loc!r} expected {expected} ({err.get('msg', '')})",
        field=loc,
        expected=expected,
    )


def decode_list(model: Type[R], value: JsonValue) -> list[R]:
    """Decode an array of objects, preserving order. One bad element fails the whole list."""
    if not isinstance(value, JsonArray):
        raise DecodeError(
            f"expected array of {model.__name__}, got {type_name(value)}",
            expected="array",
        )
    out: list[R] = []
    for i, item in enumerate(value.items):
        try:
            out.append(model.from_json(item))
        except DecodeError as e:
            raise e.at_index(i) from e
    return out
