"""
Questionnaire response request schema.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, StrictStr, field_validator


class QuestionnaireCreate(BaseModel):
    respondent: StrictStr = Field(..., min_length=1)
    q1: StrictStr = Field(..., min_length=1)
    q2: StrictStr = Field(..., min_length=1)
    q3: StrictStr = Field(..., min_length=1)
    q4: StrictStr = Field(..., min_length=1)
    q5: StrictStr = Field(..., min_length=1)
    # Optional link to the event the questionnaire was filled in at.
    event_id: UUID | None = None

    @field_validator("event_id", mode="before")
    @classmethod
    def _event_id_is_text(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            raise ValueError("event_id must be a UUID string")
        return value
