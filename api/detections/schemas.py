"""
Detection request schema.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any
from uuid import UUID

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, Strict, StrictInt, StrictStr, field_validator

# Ints stay ints so integer columns (rssi) bind without a float conversion.
# NaN and Infinity are not JSON numbers and are rejected.
FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
Number = StrictInt | FiniteFloat


def parse_iso_timestamp(value: str) -> datetime:
    """
    Parse an extended-format ISO-8601 timestamp ("YYYY-MM-DDTHH:MM:SS[.f][Z|+HH:MM]").
    """
    raw = value.strip()
    if len(raw) < 10 or raw[4] != "-" or raw[7] != "-":
        raise ValueError("detected_at must be an ISO-8601 string")
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError("detected_at must be an ISO-8601 string") from exc


class NewDetection(BaseModel):
    """
    One record from a sensor or app upload.

    `mac_address` must be present but may be null. Every other field may be
    left out. Numbers must be JSON numbers and strings must be JSON strings.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    mac_address: StrictStr | None
    event_id: UUID | None = None
    signal_type: StrictStr | None = None
    rssi: Number | None = None
    estimated_distance: Number | None = None
    latitude: Number | None = None
    longitude: Number | None = None
    detected_at: datetime | None = Field(default=None)

    @field_validator("event_id", mode="before")
    @classmethod
    def _event_id_is_text(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            raise ValueError("event_id must be a UUID string")
        return value

    @field_validator("detected_at", mode="before")
    @classmethod
    def _detected_at_is_iso_text(cls, value: Any) -> datetime:
        # Omitted is fine; an explicit null, a non-string or an epoch string is not.
        if not isinstance(value, str):
            raise ValueError("detected_at must be an ISO-8601 string")
        return parse_iso_timestamp(value)

    @field_validator("detected_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
