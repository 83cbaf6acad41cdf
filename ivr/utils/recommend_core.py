# =============================================
# File: ivr/utils/recommend_core.py
# Purpose: Core recommender types: departments, category rules, result schema
# =============================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Literal, Tuple

from pydantic import BaseModel, ConfigDict


class Department(str, Enum):
    """Closed set of departments. Declaration order is the tie-break order."""

    SALES = "sales"
    SUPPORT = "support"
    TECH = "tech"
    BILLING = "billing"
    GENERAL = "general"


Confidence = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class CategoryRule:
    pattern: str
    department: Department
    base_score: float
    category: str  # display label only, never scored

    def matches(self, page: str) -> bool:
        return self.pattern in page


# First match wins, so the order here is the priority order.
RULES: Tuple[CategoryRule, ...] = (
    CategoryRule("product", Department.SALES, 3, "Product info"),
    CategoryRule("pricing", Department.SALES, 5, "Pricing"),
    CategoryRule("support", Department.SUPPORT, 4, "Support"),
    CategoryRule("tech", Department.TECH, 4, "Technical support"),
    CategoryRule("billing", Department.BILLING, 5, "Billing"),
    CategoryRule("faq", Department.SUPPORT, 3, "FAQ"),
)

REASONS: Dict[Department, str] = {
    Department.SALES: "You have been browsing product and pricing pages",
    Department.SUPPORT: "You have been browsing support pages",
    Department.TECH: "You have been browsing technical help pages",
    Department.BILLING: "You have been browsing billing pages",
}
GENERIC_REASON = "Based on your overall browsing history"


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    department: Department
    score: str          # one decimal place, for display
    raw_score: float
    confidence: Confidence
    reason: str
