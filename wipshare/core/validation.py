"""Request validation gate.

Payloads are checked against pydantic schemas before any quota or ownership
logic runs. Unknown fields are stripped, defaults are applied, and every
violated field is reported in one response rather than only the first.

Schemas may declare a ``__messages__`` mapping of ``(field, error_type)`` to a
human readable message; anything not listed falls back to pydantic's text.
"""
from typing import Any, ClassVar, TypeVar
from fastapi import Body
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from wipshare.core.errors import RequestValidationFailed

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class GateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    __messages__: ClassVar[dict[tuple[str, str], str]] = {}


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts)


def error_details(exc: ValidationError | Any, schema: type[BaseModel] | None = None) -> list[dict]:
    messages = getattr(schema, "__messages__", {}) if schema is not None else {}
    details = []
    for err in exc.errors():
        field = _field_name(tuple(err.get("loc", ())))
        message = messages.get((field, err.get("type", "")), err.get("msg", "Invalid value"))
        details.append({"field": field, "message": message})
    return details


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationFailed(error_details(e, schema)) from e


def validated(schema: type[SchemaT]):
    """FastAPI dependency running ``schema`` over the raw JSON body."""
    async def dep(payload: Any = Body(...)) -> SchemaT:
        return validate_payload(schema, payload)
    return dep
