# =============================================
# File: ivr/routers/departments.py
# Purpose: List departments with their current open/closed state
# =============================================
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException

from ivr.services.departments import DepartmentSourceError, get_directory
from ivr.utils.business_hours import is_business_hours

router = APIRouter(tags=["departments"])

@router.get("/departments")
def list_departments():
    """Every department's contact details plus whether its line is open now."""
    try:
        entries = get_directory().all()
    except DepartmentSourceError as e:
        raise HTTPException(status_code=503, detail=str(e))

    now = datetime.now()
    return {
        "departments": [
            {**d.model_dump(), "open_now": is_business_hours(d.business_hours, now)}
            for d in entries.values()
        ]
    }
