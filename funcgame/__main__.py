from __future__ import annotations

import logging
import sys

import uvicorn

from funcgame.config import ConfigError, load_settings

logger = logging.getLogger("funcgame")


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Error: %s", exc)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server listening on %s:%s", settings.host, settings.port)
    uvicorn.run("funcgame.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
