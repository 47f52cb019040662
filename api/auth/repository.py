"""
Auth persistence helpers.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def get_profile_by_username(database: Database, username: str) -> dict | None:
    # Exact, case-sensitive match: "Alice" and "alice" are different profiles.
    return await database.fetch_one(
        """
        SELECT user_id AS id, username, password_hash
        FROM profiles
        WHERE username = $1
        LIMIT 1
        """,
        username,
    )


async def update_password_hash(database: Database, *, user_id: Any, password_hash: str) -> None:
    await database.execute(
        """
        UPDATE profiles
        SET password_hash = $2
        WHERE user_id = $1
        """,
        user_id,
        password_hash,
    )
