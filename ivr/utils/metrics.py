# =============================================
# File: ivr/utils/metrics.py
# Purpose: In-process counters & histograms for /metrics
# =============================================
from __future__ import annotations
from typing import Dict, Any, List
import threading
import time

_lock = threading.Lock()

_counters: Dict[str, int] = {
    "requests_total": 0,
    "recommendations_total": 0,
    "no_recommendation_total": 0,
}

# department -> times it was recommended
_department_counts: Dict[str, int] = {}

# Buckets (ms): <=5,10,50,100,500,1000, +inf
_latency_buckets: List[int] = [5, 10, 50, 100, 500, 1000]
_latency_counts: List[int] = [0 for _ in _latency_buckets] + [0]  # last is +inf

_MAX_SAMPLES: int = 1000
_endpoint_latency: Dict[str, List[float]] = {}   # "METHOD /path" -> [ms]
_endpoint_counts: Dict[str, int] = {}

def _avg(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0

def _p95(values: List[float]) -> float:
    if not values:
        return 0.0
    xs = sorted(values)
    idx = int(0.95 * (len(xs) - 1))
    return xs[idx]

def _observe_latency_ms(ms: int) -> None:
    idx = len(_latency_buckets)
    for i, thr in enumerate(_latency_buckets):
        if ms <= thr:
            idx = i
            break
    _latency_counts[idx] += 1

def record_request(latency_ms: int) -> None:
    with _lock:
        _counters["requests_total"] += 1
        _observe_latency_ms(int(latency_ms))

def record_recommendation(department: str | None) -> None:
    with _lock:
        if department is None:
            _counters["no_recommendation_total"] += 1
            return
        _counters["recommendations_total"] += 1
        _department_counts[department] = _department_counts.get(department, 0) + 1

def record_endpoint(method: str, path: str, latency_ms: float) -> None:
    key = f"{method.upper()} {path}"
    with _lock:
        _endpoint_counts[key] = _endpoint_counts.get(key, 0) + 1
        buf = _endpoint_latency.setdefault(key, [])
        buf.append(float(latency_ms))
        if len(buf) > _MAX_SAMPLES:
            del buf[: len(buf) - _MAX_SAMPLES]

def snapshot() -> Dict[str, Any]:
    with _lock:
        perf: Dict[str, Dict[str, float]] = {}
        for key, buf in _endpoint_latency.items():
            perf[key] = {
                "count": float(_endpoint_counts.get(key, 0)),
                "avg_latency_ms": _avg(buf),
                "p95_latency_ms": _p95(buf),
            }
        return {
            "counters": dict(_counters),
            "departments": dict(_department_counts),
            "latency_ms": {
                "buckets": list(_latency_buckets) + ["+Inf"],
                "counts": list(_latency_counts),
            },
            "performance": {
                "endpoints": perf,
                "generated_at": time.time(),
            },
        }

def reset() -> None:
    with _lock:
        for k in _counters:
            _counters[k] = 0
        _department_counts.clear()
        _endpoint_latency.clear()
        _endpoint_counts.clear()
        for i in range(len(_latency_counts)):
            _latency_counts[i] = 0

def recommendation_summary() -> Dict[str, Any]:
    """How often /recommend found a department, and each department's share of the picks."""
    with _lock:
        issued = _counters["recommendations_total"]
        absent = _counters["no_recommendation_total"]
        scored = issued + absent
        return {
            "requests": scored,
            "issued": issued,
            "absent": absent,
            "hit_rate": issued / scored if scored else 0.0,
            "share": {d: n / issued for d, n in sorted(_department_counts.items())} if issued else {},
        }
