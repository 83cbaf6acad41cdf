# =============================================
# File: ivr/utils/slog.py
# Purpose: JSON request log lines, with recommendation outcome fields for /recommend
# =============================================
from __future__ import annotations
import json
import logging
import os
import uuid
from typing import Any, Dict, Optional

_LOGGER_NAME = "ivr"
_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_logger = logging.getLogger(_LOGGER_NAME)
if not _logger.handlers:
    _logger.setLevel(getattr(logging, _LEVEL, logging.INFO))
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(message)s"))
    _logger.addHandler(_handler)
    _logger.propagate = True  # pytest caplog

def new_request_id() -> str:
    return uuid.uuid4().hex

def recommendation_context(visits: int, card: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Log fields describing one recommendation request. Page ids are not logged,
    only how many visits were scored and what came out.
    """
    if card is None:
        return {"visits": visits, "outcome": "no_signal", "department": None, "confidence": None}
    return {
        "visits": visits,
        "outcome": "recommended",
        "department": card["department"],
        "confidence": card["confidence"],
        "score": card["score"],
        "phone_active": card["phone_active"],
    }

def log_event(event: str, **fields: Any) -> None:
    rec = {"event": event}
    rec.update(fields)
    _logger.info(json.dumps(rec, ensure_ascii=False))

def finalize_request_log(
    request_id: str,
    method: str,
    path: str,
    status: int,
    latency_ms: int,
    client_ip: str | None,
    recommendation: Dict[str, Any] | None = None,
) -> None:
    """One `request.completed` line; recommendation fields are merged in when the route set them."""
    payload: Dict[str, Any] = {
        "request_id": request_id,
        "method": method,
        "path": path,
        "status": status,
        "latency_ms": latency_ms,
        "client_ip": client_ip or "",
    }
    if recommendation:
        payload.update(recommendation)
    log_event("request.completed", **payload)
