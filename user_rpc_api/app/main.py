"""
Main entrypoint for the User RPC API.

This module assembles the FastAPI application, sets up logging, CORS
and error handling and mounts the procedure endpoint.  ``create_app``
builds a fresh application with its own in-memory ``UserService``;
the module-level ``app`` is what uvicorn serves::

    uvicorn user_rpc_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health
from .api.rpc.router import router as rpc_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.user_service import UserService
from .services.user_store import UserStore


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[UserStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use instead of the ones read from the environment.
    store : Optional[UserStore]
        Store backing the user procedures.  Defaults to a store holding
        the three seed users.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, logfile=settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Server running on http://localhost:%s%s", settings.port, settings.rpc_prefix
        )
        yield

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.user_service = UserService(store if store is not None else UserStore())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": str(exc) if settings.is_development else None,
            },
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(rpc_router, prefix=settings.rpc_prefix, tags=["rpc"])
    return app


app = create_app()
