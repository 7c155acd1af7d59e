from __future__ import annotations

import logging
import time

from fastapi import Request

logger = logging.getLogger("lead_rotation")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def observe_request(request: Request, call_next):
    start = time.perf_counter()
    path = request.url.path
    try:
        response = await call_next(request)
    except Exception:
        latency_ms = (time.perf_counter() - start) * 1000.0
        logger.exception(
            "request_failed method=%s path=%s latency_ms=%.2f",
            request.method,
            path,
            latency_ms,
        )
        raise

    latency_ms = (time.perf_counter() - start) * 1000.0
    logger.info(
        "request_complete method=%s path=%s status=%s latency_ms=%.2f",
        request.method,
        path,
        response.status_code,
        latency_ms,
    )
    return response
