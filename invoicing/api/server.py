"""HTTP server runner.

Run with: python -m invoicing.api.server
Or: uvicorn invoicing.api.main:app
"""

import logging

import uvicorn

from invoicing.shared.config import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Configure logging and serve the API."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"SMTP server: {settings.smtp_host}:{settings.smtp_port}")

    uvicorn.run(
        "invoicing.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
