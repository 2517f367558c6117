"""Create all tables for a fresh deployment without running migrations."""

import logging

from pulse_stage.core.log_config import configure_logging
from pulse_stage.core.settings import settings
from pulse_stage.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database tables created")


def main() -> None:
    configure_logging(settings.log_level)
    init_db()


if __name__ == "__main__":
    main()
