"""
Observation persistence.
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.errors import StorageError


async def list_observations(database: Database, *, limit: int = 100) -> list[dict[str, Any]]:
    return await database.fetch_all(
        """
        SELECT id, user_id, full_name, observation_details, created_at
        FROM observations
        ORDER BY created_at DESC
        LIMIT $1
        """,
        limit,
    )


async def create_observation(
    database: Database,
    *,
    full_name: str,
    observation_details: str,
) -> dict[str, Any]:
    row = await database.fetch_one(
        """
        INSERT INTO observations (full_name, observation_details)
        VALUES ($1, $2)
        RETURNING id, user_id, full_name, observation_details, created_at
        """,
        full_name,
        observation_details,
    )
    if row is None:
        raise StorageError()
    return row
