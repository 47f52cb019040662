"""
Bulk detection ingestion.

A POST /detections body is a JSON array of detection objects coming from
sensors in the field. The whole array is validated first, then written with
one multi-row INSERT inside a transaction: either every record is stored or
none is.

Placeholder layout for N records of F columns:

    record 0 -> $1 .. $F
    record 1 -> $F+1 .. $2F
    record i -> $(i*F + 1) .. $(i*F + F)

`build_insert` is the only place that computes these offsets.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from core.db import Database
from core.errors import InvalidPayload
from core.validation import validate_many

from . import repository
from .schemas import NewDetection

logger = logging.getLogger(__name__)

DETECTION_COLUMNS: tuple[str, ...] = (
    "event_id",
    "mac_address",
    "signal_type",
    "rssi",
    "estimated_distance",
    "latitude",
    "longitude",
    "detected_at",
)
FIELDS_PER_RECORD = len(DETECTION_COLUMNS)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_row(detection: NewDetection, *, received_at: datetime) -> tuple[Any, ...]:
    """
    Flatten one validated detection into column order.

    Missing optional fields become None so every row has the same width.
    A missing `detected_at` becomes the time the batch was received, not the
    time the sensor saw the device.
    """
    return (
        detection.event_id,
        detection.mac_address,
        detection.signal_type,
        detection.rssi,
        detection.estimated_distance,
        detection.latitude,
        detection.longitude,
        detection.detected_at or received_at,
    )


def build_insert(rows: Sequence[Sequence[Any]]) -> tuple[str, list[Any]]:
    """
    Build one multi-row INSERT for `rows` (each already in column order).

    Returns (sql, params) where len(params) == len(rows) * FIELDS_PER_RECORD.
    """
    if not rows:
        raise ValueError("build_insert needs at least one row.")

    values_sql: list[str] = []
    params: list[Any] = []
    for i, row in enumerate(rows):
        if len(row) != FIELDS_PER_RECORD:
            raise ValueError(f"Row {i} has {len(row)} values, expected {FIELDS_PER_RECORD}.")
        offset = i * FIELDS_PER_RECORD
        placeholders = ", ".join(f"${offset + j + 1}" for j in range(FIELDS_PER_RECORD))
        values_sql.append(f"({placeholders})")
        params.extend(row)

    sql = (
        f"INSERT INTO detections ({', '.join(DETECTION_COLUMNS)})\n"
        f"VALUES {', '.join(values_sql)}"
    )
    return sql, params


def parse_batch(body: Any, *, max_records: int) -> list[NewDetection]:
    """
    Validate a raw request body as a detection batch (all or nothing).
    """
    if isinstance(body, list) and len(body) > max_records:
        raise InvalidPayload("Batch too large")
    return validate_many(body, NewDetection, message="Invalid detection payload")


async def ingest(database: Database, body: Any, *, max_records: int) -> int:
    """
    Validate and store a detection batch. Returns the number of rows written.
    """
    detections = parse_batch(body, max_records=max_records)

    received_at = _utc_now()
    rows = [to_row(d, received_at=received_at) for d in detections]
    defaulted = sum(1 for d in detections if d.detected_at is None)
    if defaulted:
        logger.debug("detected_at_defaulted count=%s received_at=%s", defaulted, received_at.isoformat())

    sql, params = build_insert(rows)
    inserted = await repository.insert_detections(database, sql, params, expected=len(rows))
    logger.info("detections_inserted count=%s", inserted)
    return inserted
