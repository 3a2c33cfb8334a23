"""
Punto de entrada del servidor HackerIDE / Footprint-X.

Configura el logging y levanta la aplicación FastAPI con uvicorn en el
host y puerto definidos por ``HOST`` y ``PORT``.
"""

import logging

import uvicorn

from .config import AppSettings
from .observability import configure_logging


logger = logging.getLogger(__name__)


def main() -> None:
    """Punto de entrada cuando se ejecuta el módulo directamente."""
    settings = AppSettings.from_env()
    configure_logging(settings.log_level)

    from .api import app

    logger.info("Footprint-X OSINT Terminal serving on port %s", settings.port)
    logger.info("Access the terminal API at: http://%s:%s", settings.host, settings.port)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Servidor detenido por el usuario")


if __name__ == "__main__":
    main()
