from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from booking.schemas.errors import ErrorItem

_LOG = logging.getLogger("booking.errors")


class ApiValidationError(Exception):
    """Client input rejected; carries the error items returned with a 400."""

    def __init__(self, errors: list[ErrorItem]):
        super().__init__(", ".join(e.code for e in errors))
        self.errors = list(errors)


def validation_error(code: str, message: str, field: str) -> ApiValidationError:
    return ApiValidationError([ErrorItem(code=code, message=message, field=field)])


def _binding_errors(exc: RequestValidationError) -> list[ErrorItem]:
    items: list[ErrorItem] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        field = loc[-1] if loc else "body"
        items.append(ErrorItem(code=f"{field}.Invalid", message=str(err.get("msg") or "Invalid value"), field=field))
    return items


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiValidationError)
    async def _api_validation_error(request: Request, exc: ApiValidationError):
        return JSONResponse(status_code=400, content=[e.model_dump() for e in exc.errors])

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        items = _binding_errors(exc)
        _LOG.warning("Error binding request path=%s errors=%s", request.url.path, [e.code for e in items])
        return JSONResponse(status_code=400, content=[e.model_dump() for e in items])

    @app.exception_handler(SQLAlchemyError)
    async def _store_error(request: Request, exc: SQLAlchemyError):
        _LOG.error("Store failure path=%s error=%s", request.url.path, exc)
        return Response(status_code=500)
