# =============================================
# File: ivr/services/departments.py
# Purpose: Department directory (name, phone, description, hours) backed by JSON
# =============================================

# ivr/services/departments.py
from __future__ import annotations

import json
import os
import threading
from typing import Dict, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ivr.utils.business_hours import BusinessHours

_DEFAULT_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "departments.json")


class DepartmentSourceError(RuntimeError):
    """The department document is missing or malformed."""


class DepartmentInfo(BaseModel):
    id: str
    name: str
    phone: str
    description: str = ""
    business_hours: BusinessHours = Field(default_factory=BusinessHours)


def _departments_path() -> str:
    """Read at call time so tests/env overrides take effect."""
    return os.getenv("IVR_DEPARTMENTS_PATH") or _DEFAULT_PATH


class DepartmentDirectory:
    """
    Read-only department metadata keyed by department id.
    Document shape: {"departments": {"<id>": {"name": ..., "phone": ..., ...}}}
    The file is read once, lazily, on first access.
    """
    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path or _departments_path()
        self._lock = threading.Lock()
        self._mem: Optional[Dict[str, DepartmentInfo]] = None

    @property
    def path(self) -> str:
        return self._path

    def _load(self) -> Dict[str, DepartmentInfo]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DepartmentSourceError(f"cannot read departments from {self._path}: {e}") from e

        entries = raw.get("departments") if isinstance(raw, dict) else None
        if not isinstance(entries, dict):
            raise DepartmentSourceError(f"{self._path}: expected a 'departments' object")

        out: Dict[str, DepartmentInfo] = {}
        for dept_id, data in entries.items():
            try:
                out[dept_id] = DepartmentInfo(id=dept_id, **(data or {}))
            except (TypeError, ValidationError) as e:
                raise DepartmentSourceError(f"{self._path}: invalid department {dept_id!r}: {e}") from e
        logger.info(f"[departments] loaded {len(out)} departments from {self._path}")
        return out

    def _entries(self) -> Dict[str, DepartmentInfo]:
        with self._lock:
            if self._mem is None:
                self._mem = self._load()
            return self._mem

    def get(self, dept_id: str) -> Optional[DepartmentInfo]:
        return self._entries().get(dept_id)

    def all(self) -> Dict[str, DepartmentInfo]:
        return dict(self._entries())

    def __contains__(self, dept_id: object) -> bool:
        return dept_id in self._entries()


_directory: Optional[DepartmentDirectory] = None


def get_directory() -> DepartmentDirectory:
    """Process-wide directory; rebuilt when IVR_DEPARTMENTS_PATH changes."""
    global _directory
    path = _departments_path()
    if _directory is None or _directory.path != path:
        _directory = DepartmentDirectory(path)
    return _directory
