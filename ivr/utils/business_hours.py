# =============================================
# File: ivr/utils/business_hours.py
# Purpose: Is a department's phone line open right now?
# =============================================

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BusinessHours(BaseModel):
    start: int = Field(9, ge=0, le=24)
    end: int = Field(18, ge=0, le=24)
    weekends: bool = False
    emergency: bool = False  # 24/7 line, ignores start/end/weekends

    @model_validator(mode="after")
    def _check_window(self) -> "BusinessHours":
        if not self.emergency and self.start >= self.end:
            raise ValueError("start must be before end")
        return self


def is_business_hours(hours: BusinessHours, now: Optional[datetime] = None) -> bool:
    if hours.emergency:
        return True
    now = now or datetime.now()
    # Monday == 0 ... Sunday == 6
    if now.weekday() >= 5 and not hours.weekends:
        return False
    return hours.start <= now.hour < hours.end
