# =============================================
# File: ivr/routers/metrics.py
# Purpose: In-process metrics, plus a recommendation outcome summary
# =============================================
from __future__ import annotations
from fastapi import APIRouter
from ivr.utils.metrics import recommendation_summary, snapshot

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("")
def get_metrics():
    """Counters, per-department picks and the latency histogram (JSON)."""
    return snapshot()

@router.get("/recommendations")
def get_recommendation_metrics():
    """Share of /recommend calls that produced a department, and how picks split across departments."""
    return recommendation_summary()
