"""
Observation request schema.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr


class ObservationCreate(BaseModel):
    full_name: StrictStr = Field(..., min_length=1)
    observation_details: StrictStr = Field(..., min_length=1)
