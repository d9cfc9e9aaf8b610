"""Operation Log Context — structured, step-by-step logging bound to one request.

Invariants:
    - At most one ApiContext active per task (contextvars): helpers deep in services
      reach it through get_api_context() without threading it through signatures
    - status goes "running" -> "success" | "error", never back
    - Steps are append-only and ordered by a monotonic clock
    - Module-level log_* helpers are no-ops outside a context

Design Decisions:
    - ContextVar over explicit parameter: record helpers are shared by every resource
      and should not know which endpoint called them
    - 4xx failures are logged at WARNING: they are client mistakes, not incidents
"""

import itertools
import logging
import time
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import AsyncIterator

logger = logging.getLogger(__name__)

_STEP_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "debug": logging.DEBUG,
}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_REQUEST_COUNTER_WRAP = 1_000_000
_request_counter = itertools.count()

_current: ContextVar["ApiContext | None"] = ContextVar("api_context", default=None)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_request_id() -> str:
    """Short sortable id: base36 epoch millis + base36 per-process counter."""
    millis = int(time.time() * 1000)
    counter = next(_request_counter) % _REQUEST_COUNTER_WRAP
    return f"{_to_base36(millis)}-{_to_base36(counter)}"


@dataclass
class LogStep:
    message: str
    status: str
    at: float


@dataclass
class ApiContext:
    """Step log for one admin operation (e.g. module "ico", title "Delete offering")."""
    module: str
    title: str
    request_id: str = field(default_factory=generate_request_id)
    user_id: str | None = None
    status: str = "running"
    steps: list[LogStep] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)

    def _emit(self, message: str, status: str) -> None:
        self.steps.append(LogStep(message, status, time.monotonic()))
        logger.log(
            _STEP_LEVELS.get(status, logging.INFO),
            f"[{self.module}] {self.title}: {message}",
            extra={
                "request_id": self.request_id,
                "log_module": self.module,
                "user_id": self.user_id,
                "step_status": status,
            },
        )

    def step(self, message: str, status: str = "info") -> None:
        self._emit(message, status)

    def success(self, message: str | None = None) -> None:
        if self.status != "running":
            return
        self.status = "success"
        self._emit(message or f"{self.title} completed", "success")

    def fail(self, message: str) -> None:
        if self.status != "running":
            return
        self.status = "error"
        self._emit(message, "error")

    def warn(self, message: str) -> None:
        self._emit(message, "warn")

    def debug(self, message: str) -> None:
        self._emit(message, "debug")

    @property
    def duration_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)


def get_api_context() -> ApiContext | None:
    return _current.get()


def log_step(message: str, status: str = "info") -> None:
    ctx = _current.get()
    if ctx is not None:
        ctx.step(message, status)


def log_success(message: str | None = None) -> None:
    ctx = _current.get()
    if ctx is not None:
        ctx.success(message)


def log_fail(message: str) -> None:
    ctx = _current.get()
    if ctx is not None:
        ctx.fail(message)


def log_warn(message: str) -> None:
    ctx = _current.get()
    if ctx is not None:
        ctx.warn(message)


@asynccontextmanager
async def with_logger(
    module: str,
    title: str,
    user_id: str | None = None,
    method: str | None = None,
    url: str | None = None,
) -> AsyncIterator[ApiContext]:
    """Run an operation inside a fresh ApiContext.

    Success is recorded on normal exit unless the body already called
    fail()/success(). Exceptions are recorded and re-raised untouched.
    """
    ctx = ApiContext(module=module, title=title, user_id=user_id)
    token = _current.set(ctx)
    target = f" {method} {url}" if method and url else ""
    logger.debug(
        f"[{module}] {title} started{target}",
        extra={"request_id": ctx.request_id, "log_module": module, "user_id": user_id},
    )
    try:
        yield ctx
    except Exception as exc:
        status_code = getattr(exc, "http_status", 500)
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        if ctx.status == "running":
            ctx.status = "error"
            ctx.steps.append(LogStep(message, "error", time.monotonic()))
        level = logging.WARNING if 400 <= status_code < 500 else logging.ERROR
        logger.log(
            level,
            f"[{module}] {title} failed: {message}",
            extra={
                "request_id": ctx.request_id,
                "log_module": module,
                "user_id": user_id,
                "step_status": "error",
                "duration_ms": ctx.duration_ms,
            },
        )
        raise
    else:
        ctx.success()
        logger.info(
            f"[{module}] {title} finished",
            extra={
                "request_id": ctx.request_id,
                "log_module": module,
                "user_id": user_id,
                "step_status": ctx.status,
                "duration_ms": ctx.duration_ms,
            },
        )
    finally:
        _current.reset(token)
