"""Exception handlers: render search rejections and unexpected errors as structured JSON.

Register with register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from swp_api.config import get_settings
from swp_api.search.exceptions import SearchAPIError

logger = logging.getLogger(__name__)


def _search_error_handler(request: Request, exc: SearchAPIError) -> JSONResponse:
    """Return exc.to_dict() with the error's own status code."""
    logger.info("search rejected: %s (%s)", exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Same error shape for framework HTTP errors (404 on unknown routes, 405, ...)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": "http-error", "message": exc.detail, "data": {"status": exc.status_code}},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"code": "internal-error", "message": detail, "data": {"status": 500}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Handlers: SearchAPIError (and subclasses), StarletteHTTPException, generic Exception."""
    app.add_exception_handler(SearchAPIError, _search_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
