# ivr/routers/recommend.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ivr.services.departments import DepartmentSourceError, get_directory
from ivr.services.history import HistoryOrderError, HistoryStore, VisitRecord
from ivr.services.recommend import recommend_for_history
from ivr.utils import slog
from ivr.utils.metrics import record_recommendation

router = APIRouter(tags=["recommend"])


# ---------- Schemas ----------
class RecommendRequest(BaseModel):
    """
    The client's whole session history, oldest visit first.
    Nothing is kept server-side between calls.
    """
    history: List[VisitRecord] = Field(default_factory=list, max_length=1000)


class RecommendationCard(BaseModel):
    department: str
    name: str
    description: str
    phone: str
    phone_active: bool
    confidence: str
    score: str
    reason: str


class RecommendResponse(BaseModel):
    recommendation: Optional[RecommendationCard] = None
    latency_ms: int


# ---------- Endpoint ----------
@router.post("/recommend", response_model=RecommendResponse)
def post_recommend(payload: RecommendRequest, request: Request) -> Dict[str, Any]:
    """
    Suggest a department to call based on the pages visited so far.
    `recommendation` is null when the history carries no clear signal.
    """
    try:
        history = HistoryStore(payload.history)
    except HistoryOrderError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        out = recommend_for_history(history.all(), get_directory(), now=datetime.now())
    except DepartmentSourceError as e:
        raise HTTPException(status_code=503, detail=str(e))

    card = out["recommendation"]
    record_recommendation(card["department"] if card else None)
    request.state.log_context = slog.recommendation_context(len(history), card)
    return out
