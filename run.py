"""Entry point for the Natewerks API.

Starts the FastAPI application under uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Configuration such as DATABASE_URL, STRIPE_SECRET_KEY, STRIPE_PRICE_ID
and PORT is read from the environment (see
``natewerks_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from natewerks_api.app.core.config import settings
from natewerks_api.app.main import app


async def main() -> None:
    """Serve the API on ``settings.host``/``settings.port`` (default port 5000)."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
