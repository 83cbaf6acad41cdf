# =============================================
# File: tests/test_recommender.py
# Purpose: Scoring, ranking and confidence rules of the department recommender
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest

import ivr.services.recommender as rec
from ivr.services.history import VisitRecord
from ivr.services.recommender import (
    confidence_for,
    find_matching_rule,
    pick_top,
    rank_departments,
    recency_multiplier,
    recommend,
    score_departments,
    time_multiplier,
)
from ivr.utils.recommend_core import GENERIC_REASON, REASONS, Department

NOW = 1_700_000_000_000
MINUTE = 60 * 1000
HOUR = 60 * MINUTE


def _visit(page, time_spent, ago_ms):
    return VisitRecord(page=page, time_spent=time_spent, timestamp=NOW - ago_ms)


# ---------- no signal ----------

def test_empty_history_returns_none():
    assert recommend([], now_ms=NOW) is None

def test_unmatched_pages_return_none():
    history = [_visit("main", 120, MINUTE), _visit("contact", 90, 2 * MINUTE), _visit("about-us", 10, 0)]
    assert recommend(history, now_ms=NOW) is None

def test_below_floor_returns_none():
    assert pick_top({Department.TECH: 2.99}) is None
    assert pick_top({d: 0.0 for d in Department}) is None

def test_score_exactly_at_floor_is_recommended():
    # product: 3 * 1.0 * 1.0
    result = recommend([_visit("product", 10, 48 * HOUR)], now_ms=NOW)
    assert result is not None
    assert result.department == Department.SALES
    assert result.score == "3.0"
    assert result.confidence == "low"


# ---------- scenarios ----------

def test_pricing_long_dwell_old_visit_is_medium_sales():
    result = recommend([_visit("pricing", 45, 25 * HOUR)], now_ms=NOW)
    assert result.department == Department.SALES
    assert result.score == "7.5"
    assert result.confidence == "medium"
    assert result.reason == REASONS[Department.SALES]

def test_tech_help_two_hours_ago_is_low():
    result = recommend([_visit("tech-help", 10, 2 * HOUR)], now_ms=NOW)
    assert result.department == Department.TECH
    assert result.score == "4.8"
    assert result.confidence == "low"
    assert result.reason == REASONS[Department.TECH]

def test_billing_invoice_recent_long_dwell_is_high():
    result = recommend([_visit("billing-invoice", 90, 30 * MINUTE)], now_ms=NOW)
    assert result.department == Department.BILLING
    assert result.score == "15.0"
    assert result.raw_score == pytest.approx(15.0)
    assert result.confidence == "high"

def test_scores_accumulate_across_visits():
    history = [_visit("faq-software", 10, 30 * HOUR), _visit("faq-hardware", 20, 26 * HOUR)]
    result = recommend(history, now_ms=NOW)
    assert result.department == Department.SUPPORT
    assert result.score == "6.0"
    assert result.confidence == "medium"


# ---------- multipliers ----------

@pytest.mark.parametrize("seconds,expected", [(0, 1.0), (29, 1.0), (30, 1.5), (59, 1.5), (60, 2.0), (600, 2.0)])
def test_time_multiplier_bands(seconds, expected):
    assert time_multiplier(seconds) == expected

@pytest.mark.parametrize("ago,expected", [
    (0, 1.5),
    (HOUR - 1, 1.5),
    (HOUR, 1.2),
    (24 * HOUR - 1, 1.2),
    (24 * HOUR, 1.0),
    (30 * 24 * HOUR, 1.0),
])
def test_recency_multiplier_bands(ago, expected):
    assert recency_multiplier(NOW - ago, NOW) == expected

def test_future_timestamp_counts_as_recent():
    assert recency_multiplier(NOW + HOUR, NOW) == 1.5

def test_longer_dwell_never_lowers_contribution():
    short = score_departments([_visit("support", 10, 3 * HOUR)], NOW)
    long = score_departments([_visit("support", 60, 3 * HOUR)], NOW)
    assert long[Department.SUPPORT] >= short[Department.SUPPORT]

def test_recent_visit_outscores_stale_one():
    recent = score_departments([_visit("tech", 10, 10 * MINUTE)], NOW)
    stale = score_departments([_visit("tech", 10, 48 * HOUR)], NOW)
    assert recent[Department.TECH] > stale[Department.TECH]


# ---------- rules & ranking ----------

def test_first_matching_rule_wins():
    assert find_matching_rule("faq-billing").department == Department.BILLING
    assert find_matching_rule("product-pricing").base_score == 3
    assert find_matching_rule("faq-software").category == "FAQ"
    assert find_matching_rule("contact") is None

def test_accumulator_covers_every_department():
    scores = score_departments([_visit("pricing", 10, 0)], NOW)
    assert set(scores) == set(Department)
    assert scores[Department.GENERAL] == 0.0

def test_tie_goes_to_department_declared_first():
    ranked = rank_departments({Department.BILLING: 5.0, Department.SALES: 5.0, Department.TECH: 1.0})
    assert [d for d, _ in ranked] == [Department.SALES, Department.BILLING, Department.TECH]

    history = [_visit("billing", 10, 30 * HOUR), _visit("pricing", 10, 30 * HOUR)]
    assert recommend(history, now_ms=NOW).department == Department.SALES

def test_rank_drops_non_positive_scores():
    ranked = rank_departments({Department.SALES: 0.0, Department.TECH: -1.0, Department.BILLING: 4.0})
    assert ranked == [(Department.BILLING, 4.0)]

def test_general_is_never_recommended():
    result = recommend([_visit(p, 90, 0) for p in ("general", "phone-general", "other")], now_ms=NOW)
    assert result is None


# ---------- confidence & reasons ----------

@pytest.mark.parametrize("score,expected", [(8.0, "high"), (7.99, "medium"), (5.0, "medium"), (4.99, "low"), (3.0, "low")])
def test_confidence_boundaries(score, expected):
    assert confidence_for(score) == expected

def test_generic_reason_for_departments_without_entry():
    assert rec.reason_for(Department.GENERAL) == GENERIC_REASON


# ---------- clock ----------

def test_same_instant_gives_identical_results():
    history = [_visit("pricing", 45, 10 * MINUTE), _visit("tech", 70, 5 * MINUTE)]
    assert recommend(history, now_ms=NOW) == recommend(history, now_ms=NOW)

def test_default_now_uses_wall_clock(monkeypatch):
    monkeypatch.setattr(rec, "wall_clock_ms", lambda: NOW)
    result = recommend([_visit("tech-help", 10, 2 * HOUR)])
    assert result.score == "4.8"

def test_same_history_decays_over_time():
    history = [_visit("billing", 10, 0)]
    fresh = recommend(history, now_ms=NOW)
    later = recommend(history, now_ms=NOW + 2 * HOUR)
    assert fresh.raw_score > later.raw_score

def test_now_ms_keyword_is_the_reference_instant():
    history = [_visit("tech-help", 10, 2 * HOUR)]
    assert recommend(history, now_ms=NOW).score == "4.8"
    assert recommend(history, NOW + 23 * HOUR).score == "4.0"
    assert score_departments(history, now_ms=NOW)[Department.TECH] == pytest.approx(4.8)
    assert recency_multiplier(timestamp_ms=NOW - 2 * HOUR, now_ms=NOW) == 1.2
