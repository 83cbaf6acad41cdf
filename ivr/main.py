import time

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from ivr.routers import departments, metrics, recommend
from ivr.utils import slog
from ivr.utils.logging import configure_logging
from ivr.utils.metrics import record_request, record_endpoint

configure_logging()

app = FastAPI(title="Virtual IVR Support Menu")


@app.middleware("http")
async def _logging_middleware(request, call_next):
    start = time.perf_counter()
    req_id = slog.new_request_id()
    client_ip = request.client.host if request.client else None
    try:
        response = await call_next(request)
    except Exception as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        ctx = getattr(request.state, "log_context", {})
        slog.log_event(
            "request.error",
            request_id=req_id,
            path=str(request.url.path),
            method=request.method,
            latency_ms=latency_ms,
            client_ip=client_ip,
            error=str(e),
            **(ctx or {}),
        )
        raise
    latency_ms = int((time.perf_counter() - start) * 1000)
    ctx = getattr(request.state, "log_context", {}) or {}
    slog.finalize_request_log(
        request_id=req_id,
        method=request.method,
        path=str(request.url.path),
        status=response.status_code,
        latency_ms=latency_ms,
        client_ip=client_ip,
        recommendation=ctx,
    )
    record_request(latency_ms=latency_ms)
    record_endpoint(method=request.method, path=str(request.url.path), latency_ms=latency_ms)
    response.headers["X-Request-ID"] = req_id
    return response


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(recommend.router)
app.include_router(departments.router)
app.include_router(metrics.router)
