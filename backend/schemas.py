from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from lottobridge.validation import DRAW_PATTERN


class LatestResultResponse(BaseModel):
    dateISO: str = Field(..., description="ISO-8601 timestamp the results pertain to.")
    midday: Optional[str] = Field(None, description="Midday draw as DDD-DDDD, if confirmed.")
    evening: Optional[str] = Field(None, description="Evening draw as DDD-DDDD, if confirmed.")

    @field_validator("midday", "evening")
    @classmethod
    def validate_draw(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not DRAW_PATTERN.fullmatch(value):
            raise ValueError("Draw results must look like DDD-DDDD.")
        return value
