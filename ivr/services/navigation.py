# =============================================
# File: ivr/services/navigation.py
# Purpose: Turn menu page transitions into visit records
# =============================================

from __future__ import annotations

from typing import Optional

from loguru import logger

from ivr.services.history import HistoryStore, VisitRecord
from ivr.services.recommender import wall_clock_ms

MAIN_PAGE = "main"


class NavigationTracker:
    """
    Tracks the page currently shown and when it was opened.
    Leaving any page other than the main menu appends a completed visit
    (page left, whole seconds spent, time of leaving) to the history.
    A clock that steps backwards is treated as no time passing, so the
    history stays chronological.
    """
    def __init__(
        self,
        history: Optional[HistoryStore] = None,
        start_page: str = MAIN_PAGE,
        now_ms: Optional[int] = None,
    ) -> None:
        self._history = history if history is not None else HistoryStore()
        self._current = start_page
        self._started_at = wall_clock_ms() if now_ms is None else now_ms

    @property
    def current_page(self) -> str:
        return self._current

    @property
    def history(self) -> HistoryStore:
        return self._history

    def navigate_to(self, page: str, now_ms: Optional[int] = None) -> Optional[VisitRecord]:
        now = wall_clock_ms() if now_ms is None else now_ms
        now = max(now, self._started_at)
        time_spent = (now - self._started_at) // 1000

        visit: Optional[VisitRecord] = None
        if self._current != MAIN_PAGE:
            visit = VisitRecord(page=self._current, time_spent=time_spent, timestamp=now)
            self._history.append(visit)
            logger.debug(f"[navigation] left={self._current} spent={time_spent}s")

        self._current = page
        self._started_at = now
        return visit
