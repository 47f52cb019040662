"""
Event queries. Events are created elsewhere; this API only reads them.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_events(database: Database, *, limit: int = 100) -> list[dict[str, Any]]:
    return await database.fetch_all(
        """
        SELECT id, user_id, event_name, event_description, created_at
        FROM events
        ORDER BY created_at DESC
        LIMIT $1
        """,
        limit,
    )
