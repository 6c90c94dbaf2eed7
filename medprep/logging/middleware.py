# medprep/logging/middleware.py
"""Request logging middleware writing every API call to the log table."""

import time
import json
import os
import getpass
import logging
import platform
import socket
from datetime import datetime
from typing import Callable

from fastapi import Request, Response
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from medprep.core import config
from medprep.core.database import SessionLocal
from medprep.logging.models import Log

logger = logging.getLogger(__name__)

# Request headers never written to the log table
REDACTED_HEADERS = {"x-admin-token", "authorization", "cookie"}


def get_username() -> str:
    try:
        return os.environ.get("USER") or os.environ.get("USERNAME") or getpass.getuser() or "unknown_user"
    except (KeyError, OSError):
        return "unknown_user"


def get_hostname() -> str:
    return socket.gethostname() or platform.node() or "unknown_host"


def loggable_headers(request: Request) -> str:
    return json.dumps(
        {
            key: ("[redacted]" if key.lower() in REDACTED_HEADERS else value)
            for key, value in request.headers.items()
        }
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.username = get_username()
        self.hostname = get_hostname()
        self.application_id = config.APPLICATION_ID

        logger.info(
            f"Logging middleware initialized with username: {self.username} "
            f"on host: {self.hostname}, App ID: {self.application_id}"
        )

    async def dispatch(self, request: Request, call_next: Callable):
        # Paths that should be excluded from logging
        excluded_paths = ["/api/logs", "/docs", "/openapi.json"]

        if any(request.url.path.startswith(path) for path in excluded_paths):
            return await call_next(request)

        start_time = time.time()

        # --- Read request body ---
        body_bytes = await request.body()
        request_body = body_bytes.decode("utf-8", errors="ignore")

        # Reconstruct stream
        async def receive() -> dict:
            return {"type": "http.request", "body": body_bytes}

        request = Request(request.scope, receive=receive)

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        status_code = response.status_code

        response_body = b""

        if isinstance(response, Response) and hasattr(response, "body"):
            response_body = response.body
        elif hasattr(response, "body_iterator"):
            # Streaming response: collect chunks while passing them through
            original_iterator = response.body_iterator
            chunks = []

            async def buffer_iterator():
                nonlocal response_body
                async for chunk in original_iterator:
                    chunks.append(chunk)
                    yield chunk
                response_body = b"".join(chunks)

            response.body_iterator = buffer_iterator()

        # --- Log to DB (in background) ---
        def log_to_db():
            body_to_log = (
                response_body.decode("utf-8", errors="ignore")
                if response_body
                else "[Response body not available]"
            )
            log = Log(
                timestamp=datetime.now(),
                method=request.method,
                path=str(request.url.path),
                status_code=status_code,
                client_ip=request.client.host if request.client else None,
                request_headers=loggable_headers(request),
                request_body=request_body,
                response_body=body_to_log,
                processing_time=duration_ms,
                user_agent=request.headers.get("user-agent"),
                username=self.username,
                hostname=self.hostname,
                application_id=self.application_id,
            )
            try:
                with SessionLocal() as session:
                    session.add(log)
                    session.commit()
            except Exception:
                logger.exception(f"Failed to write request log for {request.method} {request.url.path}")

        response.background = getattr(response, "background", None) or BackgroundTask(log_to_db)

        return response
