"""Validation layer - checks payloads against schema constraints.

``try_validate`` never raises for bad input; it returns either the parsed
model or a mapping of field name to violation messages, so handlers can decide
when validation happens relative to other steps (e.g. existence checks).
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from player_api.core.errors import ValidationProblem

M = TypeVar("M", bound=BaseModel)

# Key used for errors that apply to the payload as a whole
ROOT_FIELD = "$"

# Location prefixes FastAPI adds to request validation errors
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def collect_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error dicts by dotted field path."""
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or ROOT_FIELD
        grouped.setdefault(field, []).append(err["msg"])
    return grouped


def try_validate(model_cls: type[M], payload: Any) -> tuple[M | None, dict[str, list[str]]]:
    """Validate ``payload`` into ``model_cls``.

    Returns ``(instance, {})`` when valid, ``(None, errors)`` otherwise.
    """
    try:
        return model_cls.model_validate(payload), {}
    except ValidationError as exc:
        return None, collect_errors(exc.errors())


def validate_or_raise(model_cls: type[M], payload: Any) -> M:
    """Like try_validate, but raises ValidationProblem on failure."""
    instance, errors = try_validate(model_cls, payload)
    if errors:
        raise ValidationProblem(errors)
    return instance
