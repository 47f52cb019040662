"""
Device (map position) API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core.db import Database, get_database

from . import repository

router = APIRouter()


@router.get("/devices")
async def list_devices(
    database: Database = Depends(get_database),
    _: Any = Depends(auth_dependencies.get_current_claims),
) -> list[dict]:
    return await repository.list_devices(database)
