"""Error envelope and formatting of validation errors into a flat field/message list."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """One validation failure: dotted location and human-readable message."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope: {error, details?}."""

    error: str
    details: list[FieldError] | None = Field(default=None)


# Leading location parts that only say where the value came from.
_SOURCE_PREFIXES = frozenset({"body", "path", "query", "cookie", "header"})


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Turn pydantic/FastAPI error dicts into [{field, message}]."""
    formatted: list[FieldError] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        source = "body"
        if loc and loc[0] in _SOURCE_PREFIXES:
            source, loc = loc[0], loc[1:]
        # Model-level errors have no field; JSON decode errors carry only a character offset.
        if all(part.isdigit() for part in loc):
            loc = [source]
        message = str(err.get("msg", "Invalid value"))
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        formatted.append(FieldError(field=".".join(loc), message=message))
    return formatted
