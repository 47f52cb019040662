"""
Questionnaire response business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core.db import Database
from core.errors import StorageError
from core.validation import validate

from . import repository, schemas

logger = logging.getLogger(__name__)


async def create_response(database: Database, body: Any) -> dict[str, Any]:
    payload = validate(body, schemas.QuestionnaireCreate, message="Invalid questionnaire payload")
    try:
        row = await repository.create_response(
            database,
            respondent=payload.respondent,
            answers=(payload.q1, payload.q2, payload.q3, payload.q4, payload.q5),
            event_id=payload.event_id,
        )
    except StorageError as exc:
        raise StorageError("Failed to create questionnaire response") from exc
    logger.info("questionnaire_response_created id=%s", row.get("id"))
    return row
