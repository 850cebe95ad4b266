# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request

logger = logging.getLogger("contactbook.http")

SLOW_REQUEST_SECONDS = 1.0


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


async def log_requests(request: Request, call_next: Callable):
    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed = time.perf_counter() - start_time
        logger.error(f"{request.method} {request.url.path} - ERROR - {elapsed:.2f}s")
        raise
    elapsed = time.perf_counter() - start_time
    # Only slow requests and server errors; 3xx/4xx are routine for form posts.
    if elapsed > SLOW_REQUEST_SECONDS or response.status_code >= 500:
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {elapsed:.2f}s")
    return response
