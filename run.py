"""Entry point for the User RPC API server.

Starts the FastAPI application with uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (or a ``.env``
file); defaults are ``0.0.0.0`` and ``4000``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from user_rpc_api.app.core.config import settings
from user_rpc_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
