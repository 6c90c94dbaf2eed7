# medprep/core/router.py
"""
Module for registering routes in the FastAPI application.
"""

from fastapi import FastAPI

from medprep.resources.router import router as resource_router
from medprep.subscriptions.router import router as subscription_router
from medprep.logging.router import router as log_router


def register_routes(app: FastAPI) -> None:
    """
    Registers all the routes for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    app.include_router(resource_router, prefix="/api")
    app.include_router(subscription_router, prefix="/api")
    app.include_router(log_router, prefix="/api")
