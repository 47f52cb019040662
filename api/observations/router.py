"""
Observation API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from auth import dependencies as auth_dependencies
from core.db import Database, get_database
from core.validation import clamp_limit

from . import repository, service

router = APIRouter()

DEFAULT_LIMIT = 100
MAX_LIMIT = 500


@router.get("/observations")
async def list_observations(
    limit: str | None = Query(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> list[dict]:
    return await repository.list_observations(
        database,
        limit=clamp_limit(limit, default=DEFAULT_LIMIT, ceiling=MAX_LIMIT),
    )


@router.post("/observations")
async def create_observation(
    body: Any = Body(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> dict:
    return await service.create_observation(database, body)
