"""
Detection persistence.
This module is where detection-related SQL lives.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from core.db import Database, rows_affected
from core.errors import StorageError

logger = logging.getLogger(__name__)


async def list_detections(
    database: Database,
    *,
    event_id: UUID | None = None,
    limit: int = 200,
) -> list[dict[str, Any]]:
    """
    Newest detections first, optionally only those for one event.
    """
    sql = """
        SELECT blustick_id, event_id, mac_address, signal_type, rssi,
               estimated_distance, latitude, longitude, detected_at
        FROM detections
    """
    params: list[Any] = []
    if event_id is not None:
        sql += " WHERE event_id = $1"
        params.append(event_id)
    sql += f" ORDER BY detected_at DESC LIMIT ${len(params) + 1}"
    params.append(limit)
    return await database.fetch_all(sql, *params)


async def insert_detections(
    database: Database,
    sql: str,
    params: list[Any],
    *,
    expected: int,
) -> int:
    """
    Run a prepared multi-row INSERT in one transaction.

    If the server reports a row count other than `expected`, the transaction
    is rolled back and StorageError is raised.
    """
    try:
        async with database.transaction() as conn:
            status = await conn.execute(sql, *params)
            inserted = rows_affected(status)
            if inserted != expected:
                logger.error(
                    "detections_count_mismatch expected=%s inserted=%s status=%r",
                    expected,
                    inserted,
                    status,
                )
                raise StorageError()
    except StorageError as exc:
        raise StorageError("Failed to insert detections") from exc
    return inserted
