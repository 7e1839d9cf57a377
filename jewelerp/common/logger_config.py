# jewelerp/common/logger_config.py
"""Application-wide logging configuration."""

import logging
from typing import Optional

from rich.logging import RichHandler

from jewelerp.common.config.settings import settings

LEDGER_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Installs a single rich console handler on the root logger.

    When LOG_FILE is configured, engine activity is also written to that file in
    plain text so failed or compensated transactions can be reconciled later.
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,  # item names and descriptions may contain [brackets]
        rich_tracebacks=True,
        tracebacks_word_wrap=True,
        tracebacks_suppress=[
            logging,
        ],
    )
    handlers: list[logging.Handler] = [rich_handler]

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LEDGER_LOG_FORMAT))
        handlers.append(file_handler)

    # Re-running setup must not stack duplicate handlers
    root_logger.handlers = handlers

    # Suppress verbose logging from libraries
    for noisy_logger in ("mysql.connector", "requests", "urllib3"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
