# medprep/logging/exception_handlers.py
"""Top-level handlers rendering every failure as `{"success": false, "error": ...}`."""

import json
import logging
import traceback
from datetime import datetime

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from medprep.core import config
from medprep.core.database import SessionLocal
from medprep.core.exceptions import AppError
from medprep.core.responses import error_content
from medprep.core.validation import validation_error_from_errors
from medprep.logging.middleware import get_hostname, get_username, loggable_headers
from medprep.logging.models import Log

logger = logging.getLogger(__name__)

USERNAME = get_username()
HOSTNAME = get_hostname()


def safe_json_dumps(obj):
    return json.dumps(obj, indent=2, default=str)


async def app_error_handler(request: Request, exc: AppError):
    """Render operational errors with their own status and message."""
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_content(exc.message))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render FastAPI's own parameter and body validation as a 400."""
    error = validation_error_from_errors(list(exc.errors()))
    logger.info(f"{request.method} {request.url.path} rejected: {error.message}")
    return JSONResponse(status_code=error.status_code, content=error_content(error.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors, such as unknown routes, in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions and log them to database."""
    error_traceback = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}\n{error_traceback}")

    try:
        with SessionLocal() as session:
            log = Log(
                timestamp=datetime.now(),
                method=request.method,
                path=str(request.url.path),
                status_code=500,
                client_ip=request.client.host if request.client else None,
                request_headers=loggable_headers(request),
                request_body=None,
                response_body=safe_json_dumps(
                    {"error": str(exc), "type": type(exc).__name__, "traceback": error_traceback}
                ),
                processing_time=None,
                user_agent=request.headers.get("user-agent"),
                username=USERNAME,
                hostname=HOSTNAME,
                application_id=config.APPLICATION_ID,
            )
            session.add(log)
            session.commit()
    except Exception:
        logger.exception("Error logging unhandled exception")

    return JSONResponse(status_code=500, content=error_content("Internal Server Error"))
