"""Run the token server, refusing to start without signing material."""
from __future__ import annotations

import logging
import sys

import uvicorn

from tokengen.core.config import Settings, get_settings
from tokengen.main import configure_logging

UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}

logger = logging.getLogger("tokengen.serve")


def check_settings(settings: Settings) -> int:
    """Return a process exit code: 0 when the server may start."""

    missing = settings.missing_signing_material()
    if missing:
        logger.error("%s environment variables are required", " and ".join(missing))
        return 1
    return 0


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    code = check_settings(settings)
    if code:
        return code

    display_host = "localhost" if settings.host in ("0.0.0.0", "") else settings.host
    logger.info("Access the server at http://%s:%s", display_host, settings.port)
    logger.info("For example, http://%s:%s/token?room=room1&identity=user1", display_host, settings.port)

    log_level = settings.log_level.lower()
    uvicorn.run(
        "tokengen.main:app",
        host=settings.host,
        port=settings.port,
        log_level=log_level if log_level in UVICORN_LEVELS else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
