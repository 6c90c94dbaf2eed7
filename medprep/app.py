"""FastAPI application entry point for the MedPrep API."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from medprep.core import config
from medprep.core.database import init_db
from medprep.core.exceptions import AppError
from medprep.core.responses import ApiResponse
from medprep.core.router import register_routes
from medprep.logging.middleware import LoggingMiddleware
from medprep.logging.exception_handlers import (
    app_error_handler,
    request_validation_exception_handler,
    general_exception_handler,
    http_exception_handler,
)


def create_app() -> FastAPI:

    config.configure_logging()

    app = FastAPI(
        title="NextGen MedPrep API",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    init_db()

    # Add request logger middleware
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)

    @app.get("/api/health", response_model=ApiResponse[dict], tags=["Health"])
    async def health_check() -> ApiResponse[dict]:
        return ApiResponse(data={"status": "ok", "application_id": config.APPLICATION_ID})

    return app
