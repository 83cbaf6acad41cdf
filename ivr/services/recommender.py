# =============================================
# File: ivr/services/recommender.py
# Purpose: Rule-based department recommendation from page-visit history
# =============================================

# ivr/services/recommender.py
from __future__ import annotations

import time
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from ivr.services.history import VisitRecord
from ivr.utils.recommend_core import (
    GENERIC_REASON,
    REASONS,
    RULES,
    CategoryRule,
    Confidence,
    Department,
    RecommendationResult,
)

# Minimum winning score before anything is recommended.
SIGNIFICANCE_FLOOR = 3.0
HIGH_CONFIDENCE_MIN = 8.0
MEDIUM_CONFIDENCE_MIN = 5.0

_HOUR_MS = 60 * 60 * 1000
_DEPARTMENT_ORDER = {d: i for i, d in enumerate(Department)}


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def find_matching_rule(page: str) -> Optional[CategoryRule]:
    """First rule whose pattern occurs in the page id, or None."""
    for rule in RULES:
        if rule.matches(page):
            return rule
    return None


def time_multiplier(time_spent: int) -> float:
    if time_spent < 30:
        return 1.0
    if time_spent < 60:
        return 1.5
    return 2.0


def recency_multiplier(timestamp_ms: int, now_ms: int) -> float:
    hours_since = (now_ms - timestamp_ms) / _HOUR_MS
    if hours_since < 1:
        return 1.5
    if hours_since < 24:
        return 1.2
    return 1.0


def score_departments(history: Sequence[VisitRecord], now_ms: int) -> Dict[Department, float]:
    """
    Accumulate per-department scores. Every department has an entry, including
    GENERAL which no rule targets. Visits matching no rule contribute nothing.
    """
    scores: Dict[Department, float] = {d: 0.0 for d in Department}
    for visit in history:
        rule = find_matching_rule(visit.page)
        if rule is None:
            continue
        scores[rule.department] += (
            rule.base_score
            * time_multiplier(visit.time_spent)
            * recency_multiplier(visit.timestamp, now_ms)
        )
    return scores


def rank_departments(scores: Dict[Department, float]) -> List[Tuple[Department, float]]:
    """
    Positive-score departments, best first. Equal scores are ordered by
    Department declaration order (sales, support, tech, billing, general).
    """
    ranked = [(d, s) for d, s in scores.items() if s > 0]
    ranked.sort(key=lambda ds: (-ds[1], _DEPARTMENT_ORDER[ds[0]]))
    return ranked


def pick_top(scores: Dict[Department, float]) -> Optional[Tuple[Department, float]]:
    ranked = rank_departments(scores)
    if not ranked:
        return None
    top = ranked[0]
    if top[1] < SIGNIFICANCE_FLOOR:
        return None
    return top


def confidence_for(score: float) -> Confidence:
    if score >= HIGH_CONFIDENCE_MIN:
        return "high"
    if score >= MEDIUM_CONFIDENCE_MIN:
        return "medium"
    return "low"


def reason_for(department: Department) -> str:
    return REASONS.get(department, GENERIC_REASON)


def recommend(
    history: Sequence[VisitRecord],
    now_ms: Optional[int] = None,
) -> Optional[RecommendationResult]:
    """
    Return the single best department for this history, or None when there is
    no signal (empty history, no matching page, or below the significance floor).

    Recency is measured against `now_ms` (ms since epoch, defaults to the wall
    clock), so the same history decays over time.
    """
    if not history:
        return None
    now = wall_clock_ms() if now_ms is None else now_ms

    top = pick_top(score_departments(history, now))
    if top is None:
        logger.debug(f"[recommend] visits={len(history)} no recommendation")
        return None

    department, raw = top
    result = RecommendationResult(
        department=department,
        score=f"{raw:.1f}",
        raw_score=raw,
        confidence=confidence_for(raw),
        reason=reason_for(department),
    )
    logger.info(
        f"[recommend] visits={len(history)} dept={department.value} "
        f"score={result.score} confidence={result.confidence}"
    )
    return result
