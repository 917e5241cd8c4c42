"""Translate domain errors into HTTP responses.

This is the only place a CinestreamError becomes a status code.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cinestream.core.exceptions import CinestreamError
from cinestream.core.logger import get_logger


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid input"


def register_exception_handlers(app: FastAPI, logger=None) -> None:
    logger = logger or get_logger("errors")

    @app.exception_handler(CinestreamError)
    async def handle_domain_error(request: Request, exc: CinestreamError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.exception("request_failed", path=request.url.path, detail=exc.detail, exc_info=exc)
        else:
            logger.warning(
                "request_rejected",
                path=request.url.path,
                status_code=exc.status_code,
                error=type(exc).__name__,
                detail=exc.detail,
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning("request_invalid", path=request.url.path, detail=message)
        return JSONResponse(status_code=400, content={"detail": message})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
