"""
Create the laptop shop schema.

Usage:
    python -m laptopshop
"""

from .config import settings
from .database import init_db, safe_url
from .logging_config import get_logger, setup_logging

# Setup logging
setup_logging(log_level=settings.LOG_LEVEL, service_name=settings.APP_NAME)
logger = get_logger(__name__)


def main() -> None:
    logger.info("Creating schema", url=safe_url(settings.DATABASE_URL))
    init_db()


if __name__ == "__main__":
    main()
