"""
Questionnaire response API endpoints.
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


@router.get("/questionnaire-responses")
async def list_responses(
    limit: str | None = Query(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> list[dict]:
    return await repository.list_responses(
        database,
        limit=clamp_limit(limit, default=DEFAULT_LIMIT, ceiling=MAX_LIMIT),
    )


@router.post("/questionnaire-responses")
async def create_response(
    body: Any = Body(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> dict:
    return await service.create_response(database, body)
