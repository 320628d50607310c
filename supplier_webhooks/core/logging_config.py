# supplier_webhooks/core/logging_config.py
"""
Centralized logging configuration for the application.

Keeps pipeline logs visible while quieting the HTTP server and client
libraries.
"""

import logging

from supplier_webhooks.core.config import get_settings


def configure_logging(log_level: str = None):
    """
    Configure logging for the application.

    - App code: INFO (or whatever LOG_LEVEL says)
    - uvicorn access log, httpx, httpcore: WARNING only
    """
    log_level = (log_level or get_settings().LOG_LEVEL).upper()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )

    # Quiet noisy HTTP loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Keep app loggers at configured level
    logging.getLogger("supplier_webhooks").setLevel(getattr(logging, log_level, logging.INFO))

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at level: {log_level}")
