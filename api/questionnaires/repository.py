"""
Questionnaire response persistence.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core.db import Database
from core.errors import StorageError


async def list_responses(database: Database, *, limit: int = 100) -> list[dict[str, Any]]:
    return await database.fetch_all(
        """
        SELECT id, event_id, respondent, q1, q2, q3, q4, q5, ts
        FROM questionnaire_responses
        ORDER BY ts DESC
        LIMIT $1
        """,
        limit,
    )


async def create_response(
    database: Database,
    *,
    respondent: str,
    answers: tuple[str, str, str, str, str],
    event_id: UUID | None = None,
) -> dict[str, Any]:
    row = await database.fetch_one(
        """
        INSERT INTO questionnaire_responses (event_id, respondent, q1, q2, q3, q4, q5)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING id, event_id, respondent, q1, q2, q3, q4, q5, ts
        """,
        event_id,
        respondent,
        *answers,
    )
    if row is None:
        raise StorageError()
    return row
