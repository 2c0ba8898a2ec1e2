"""Entry point for the developer portal backend.

Launches the FastAPI application with Uvicorn.  Intended to be executed
from the project root, for example under Docker, where you only specify
a single Python file to run.

Configuration such as ADMIN_API_URL, ADMIN_API_KEY, LOGO_URL and the
APIM_* variables is read from the environment (see
``developer_portal_api/app/core/config.py``).

Usage:
    python run.py
"""
import logging
import os

from uvicorn import Config, Server

from developer_portal_api.app.main import app


def main() -> None:
    """Start the API server.

    Host and port are read from environment variables ``HOST`` and
    ``PORT``.  Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    Server(config).run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Shutting down")
