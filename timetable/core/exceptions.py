"""Exception handlers mapping scheduler failures to HTTP responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from timetable.domain.errors import StoreError, ValidationError


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("timetable.errors")

    @app.exception_handler(ValidationError)
    async def _validation_handler(request: Request, exc: ValidationError):
        body: dict[str, Any] = {"message": "Invalid class session", "errors": exc.problems}
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(StoreError)
    async def _store_handler(request: Request, exc: StoreError):
        log.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        body: dict[str, Any] = {
            "message": "Timetable storage unavailable",
            "detail": str(exc),
            "completed": [o.model_dump(mode="json") for o in exc.completed],
        }
        return JSONResponse(status_code=503, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
