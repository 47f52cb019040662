"""
Device position queries.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_devices(database: Database) -> list[dict[str, Any]]:
    """
    Every current device position, most recently seen first. Not limited:
    the table holds one row per device.
    """
    return await database.fetch_all(
        """
        SELECT device_id, lat, lon, last_seen, sensor_id
        FROM devices
        ORDER BY last_seen DESC
        """
    )
