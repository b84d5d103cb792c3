"""Run the Mission42 server: ``python -m mission42_server``."""

import logging

import uvicorn

from .config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    if not settings.google_api_key:
        logger.warning("[STARTUP] GOOGLE_API_KEY is not set; chat turns will fail until it is")

    logger.info(
        "[STARTUP] Mission42 on %s:%s (model=%s, strategy=%s, creation API=%s)",
        settings.app_host,
        settings.app_port,
        settings.gemini_model,
        settings.extraction_strategy,
        settings.constellation_api_url,
    )

    uvicorn.run(
        "mission42_server.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
