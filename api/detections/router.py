"""
Detection API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from auth import dependencies as auth_dependencies
from core.db import Database, get_database
from core.validation import clamp_limit, parse_uuid

from . import ingest, repository

router = APIRouter()

DEFAULT_LIMIT = 200
MAX_LIMIT = 1000


@router.get("/detections")
async def list_detections(
    event_id: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> list[dict]:
    return await repository.list_detections(
        database,
        event_id=parse_uuid(event_id, message="Invalid event_id"),
        limit=clamp_limit(limit, default=DEFAULT_LIMIT, ceiling=MAX_LIMIT),
    )


@router.post("/detections")
async def create_detections(
    request: Request,
    body: Any = Body(default=None),
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> dict:
    """
    Bulk insert from the app or an ESP32 sensor. All records or none.
    """
    inserted = await ingest.ingest(
        database,
        body,
        max_records=request.app.state.settings.detection_batch_max,
    )
    return {"inserted": inserted}
