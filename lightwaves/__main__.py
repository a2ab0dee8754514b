"""
Run the API server.

Usage:
    python -m lightwaves
"""

import logging

import uvicorn

from lightwaves.config import get_settings
from lightwaves.models.failure import ConfigurationError

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical("CRITICAL ERROR: %s: %s", e.message, e.detail)
        raise SystemExit(1) from e

    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info("Reveal service API key configured: %s", bool(settings.ordinal_bot_api_key))
    logger.info("Indexer API key configured: %s", bool(settings.hiro_api_key))

    uvicorn.run("lightwaves.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
