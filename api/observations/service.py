"""
Observation business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core.db import Database
from core.errors import StorageError
from core.validation import validate

from . import repository, schemas

logger = logging.getLogger(__name__)


async def create_observation(database: Database, body: Any) -> dict[str, Any]:
    payload = validate(body, schemas.ObservationCreate, message="Invalid observation payload")
    try:
        row = await repository.create_observation(
            database,
            full_name=payload.full_name,
            observation_details=payload.observation_details,
        )
    except StorageError as exc:
        raise StorageError("Failed to create observation") from exc
    logger.info("observation_created id=%s", row.get("id"))
    return row
