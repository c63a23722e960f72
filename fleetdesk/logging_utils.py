# fleetdesk/logging_utils.py
from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response

from fleetdesk.config import LOG_LEVEL


logger = logging.getLogger("fleetdesk")
logger.setLevel(LOG_LEVEL)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(handler)


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def logging_middleware(request: Request, call_next: Callable) -> Response:
    request_id = str(uuid.uuid4())
    start = time.perf_counter()

    # handlers may add fields (e.g. resolved role) to the access log line
    request.state.request_id = request_id
    request.state.log_extra = {}

    try:
        response = await call_next(request)
    except Exception:
        latency_ms = (time.perf_counter() - start) * 1000.0
        logger.error(
            json.dumps(
                {
                    "ts": iso_now(),
                    "level": "error",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": 500,
                    "latency_ms": round(latency_ms, 2),
                }
            )
        )
        raise

    latency_ms = (time.perf_counter() - start) * 1000.0
    log = {
        "ts": iso_now(),
        "level": "info",
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "latency_ms": round(latency_ms, 2),
    }
    if isinstance(getattr(request.state, "log_extra", None), dict):
        log.update(request.state.log_extra)

    logger.info(json.dumps(log))
    return response
