"""
Event API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from core.db import Database, get_database
from core.validation import clamp_limit

from . import repository

router = APIRouter()

DEFAULT_LIMIT = 100
MAX_LIMIT = 500


@router.get("/events")
async def list_events(
    limit: str | None = Query(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> list[dict]:
    return await repository.list_events(
        database,
        limit=clamp_limit(limit, default=DEFAULT_LIMIT, ceiling=MAX_LIMIT),
    )
