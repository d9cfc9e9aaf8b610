"""Request Timing — logs every request with its duration.

Invariants:
    - Requests slower than slow_request_ms are logged at WARNING, the rest at DEBUG
    - The response is never modified apart from the X-Response-Time header
"""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_request_timing(app: FastAPI, slow_request_ms: int) -> None:
    @app.middleware("http")
    async def request_timing(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        level = logging.WARNING if duration_ms > slow_request_ms else logging.DEBUG
        logger.log(
            level,
            f"{request.method} {request.url.path} ({duration_ms}ms)",
            extra={"path": request.url.path, "duration_ms": duration_ms},
        )
        return response
