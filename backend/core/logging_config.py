# backend/core/logging_config.py

import logging
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None):
    """Configure root logging for hosts embedding the seating engine"""
    settings = get_settings()
    log_level = (level or settings.log_level).upper()

    logging.basicConfig(level=getattr(logging, log_level, logging.INFO), format=LOG_FORMAT)

    # SQL echo is noisy; only surface it when explicitly requested
    if not settings.log_sql_queries:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured at {log_level}")
