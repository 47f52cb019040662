"""
Request validation helpers.

Bodies are accepted as raw JSON and checked against a pydantic model here,
so every endpoint answers malformed input with a 400 and its own message
before anything touches the database.
"""

from __future__ import annotations

from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from .errors import InvalidPayload

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate(raw: Any, schema: type[ModelT], *, message: str = "Invalid input") -> ModelT:
    """
    Parse one JSON value into `schema` or raise InvalidPayload(message).
    """
    if not isinstance(raw, dict):
        raise InvalidPayload(message)
    try:
        return schema.model_validate(raw)
    except ValidationError as exc:
        raise InvalidPayload(message) from exc


def validate_many(raw: Any, schema: type[ModelT], *, message: str) -> list[ModelT]:
    """
    Validate every element of a JSON array. The first bad element fails the
    whole call; there is no partial acceptance.
    """
    if not isinstance(raw, list) or not raw:
        raise InvalidPayload("Body must be a non-empty array")
    return [validate(item, schema, message=message) for item in raw]


def clamp_limit(raw: str | None, *, default: int, ceiling: int) -> int:
    """
    Turn a `limit` query value into a usable row bound.

    Missing, non-numeric, zero or negative values fall back to `default`;
    anything above `ceiling` is capped.
    """
    try:
        value = int((raw or "").strip())
    except ValueError:
        return default
    if value <= 0:
        return default
    return min(value, ceiling)


def parse_uuid(raw: str | None, *, message: str) -> UUID | None:
    """
    Optional UUID query filter. Empty means "no filter".
    """
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError as exc:
        raise InvalidPayload(message) from exc
