import time
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from loguru import logger

from ivr.services.departments import DepartmentDirectory
from ivr.services.history import VisitRecord
from ivr.services.recommender import recommend
from ivr.utils.business_hours import is_business_hours


def recommendation_card(
    history: Sequence[VisitRecord],
    directory: DepartmentDirectory,
    now: Optional[datetime] = None,
) -> Optional[Dict[str, Any]]:
    """
    Join the engine's pick with the department's contact details.
    Returns None when there is nothing to recommend or the department is unknown
    to the directory.
    """
    now = now or datetime.now()
    result = recommend(history, now_ms=int(now.timestamp() * 1000))
    if result is None:
        return None

    dept = directory.get(result.department.value)
    if dept is None:
        logger.warning(f"[recommend] no metadata for department={result.department.value}")
        return None

    return {
        "department": dept.id,
        "name": dept.name,
        "description": dept.description,
        "phone": dept.phone,
        "phone_active": is_business_hours(dept.business_hours, now),
        "confidence": result.confidence,
        "score": result.score,
        "reason": result.reason,
    }


def recommend_for_history(
    history: Sequence[VisitRecord],
    directory: DepartmentDirectory,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    t0 = time.perf_counter()
    card = recommendation_card(history, directory, now=now)
    return {
        "recommendation": card,
        "latency_ms": int((time.perf_counter() - t0) * 1000),
    }
