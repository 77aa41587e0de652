from __future__ import annotations

import logging
import re
import sys
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
_LOG = logging.getLogger("booking.http")

MODE_LEVELS = {
    "dev": logging.DEBUG,
    "staging": logging.INFO,
    "prod": logging.INFO,
}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(mode: str) -> None:
    """Console logging with the level picked from the service running mode."""
    level = MODE_LEVELS.get(str(mode or "").strip().lower())

    root_logger = logging.getLogger()
    root_logger.setLevel(level if level is not None else logging.DEBUG)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    if level is None:
        logging.getLogger("booking").warning("Unexpected mode value mode=%s", mode)
    logging.getLogger("booking").info(
        "Service logging level level=%s", logging.getLevelName(root_logger.level)
    )


def _request_id_from_header(raw: str | None) -> str:
    value = str(raw or "").strip()
    if not value or not _REQUEST_ID_RE.fullmatch(value):
        return uuid4().hex
    return value


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _request_logging_middleware(request: Request, call_next):
        request_id = _request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started_at = perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        duration_ms = (perf_counter() - started_at) * 1000.0
        _LOG.info(
            "%s %s query=%s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            request.url.query or "-",
            response.status_code,
            duration_ms,
            request_id,
        )
        return response
