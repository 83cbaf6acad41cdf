# =============================================
# File: ivr/services/history.py
# Purpose: Session page-visit history (append-only, chronological)
# =============================================

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VisitRecord(BaseModel):
    """
    One completed page view.
    - page: page identifier, e.g. "pricing" or "faq-software".
    - time_spent: dwell time in whole seconds (alias: timeSpent).
    - timestamp: when the visit ended, milliseconds since the epoch.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: str = Field(..., min_length=1, max_length=256)
    time_spent: int = Field(..., ge=0, alias="timeSpent")
    timestamp: int = Field(..., ge=0)

    @field_validator("page")
    @classmethod
    def _trim_page(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("page must not be empty")
        return v


class HistoryOrderError(ValueError):
    """Raised when a visit would break chronological order."""


class HistoryStore:
    """
    Append-only visit history for a single session.
    - append(): adds a record; its timestamp must not precede the last one.
    - all(): the full sequence in insertion order.
    Not synchronized: the owning session serializes append/recommend calls.
    """
    def __init__(self, records: Optional[Iterable[VisitRecord]] = None) -> None:
        self._records: List[VisitRecord] = []
        for r in records or ():
            self.append(r)

    def append(self, record: VisitRecord) -> None:
        if self._records and record.timestamp < self._records[-1].timestamp:
            raise HistoryOrderError(
                f"visit to {record.page!r} at {record.timestamp} precedes "
                f"previous visit at {self._records[-1].timestamp}"
            )
        self._records.append(record)

    def all(self) -> Tuple[VisitRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[VisitRecord]:
        return iter(self.all())
