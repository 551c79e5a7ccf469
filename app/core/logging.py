"""Logging for the GroundGrid service.

Records may carry a ``fields`` mapping with calculation results (safety
verdict, GPR, matrix size, source count, timing).  The JSON formatter
flattens it into the log line so assessments can be searched by outcome.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("groundgrid.access")
calc_logger = logging.getLogger("groundgrid.calc")


class JSONFormatter(logging.Formatter):
    """One JSON object per record with the request ID and calculation fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = request_id_var.get("")
        if rid:
            entry["request_id"] = rid

        fields = getattr(record, "fields", None)
        if fields:
            entry.update(fields)

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with X-Request-ID and logs its status and timing."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)

        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers["X-Request-ID"] = rid

        access_logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "fields": {
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                }
            },
        )
        return response


@contextmanager
def log_calculation(name: str, **fields: Any) -> Iterator[dict[str, Any]]:
    """Time a grounding calculation and log it with its result fields.

    The yielded dict is logged on exit, so callers add outcome fields
    (verdict, GPR, matrix size) after the calculation has run.
    """
    record_fields: dict[str, Any] = {"calculation": name, **fields}
    start = time.perf_counter()
    yield record_fields
    record_fields["duration_ms"] = round((time.perf_counter() - start) * 1000, 1)

    summary = " ".join(f"{k}={v}" for k, v in record_fields.items() if k != "calculation")
    calc_logger.info("%s %s", name, summary, extra={"fields": record_fields})


def setup_logging(json_format: bool = False, level: str | int = logging.INFO) -> None:
    """Configure the root logger; JSON lines in production, plain text otherwise."""
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
