# =============================================
# File: ivr/utils/logging.py
# Purpose: Logging configuration
# =============================================

import os
from typing import Optional

from loguru import logger

_sink_id: Optional[int] = None

def configure_logging() -> Optional[int]:
    """Add a rotating file sink when IVR_LOG_FILE is set. Only the first call adds it."""
    global _sink_id
    path = os.getenv("IVR_LOG_FILE")
    if path and _sink_id is None:
        _sink_id = logger.add(path, rotation="10 MB", level=os.getenv("LOG_LEVEL", "INFO").upper())
    return _sink_id
