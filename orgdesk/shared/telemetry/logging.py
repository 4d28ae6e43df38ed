"""Logging configuration for the application."""

import logging
import sys

from orgdesk.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Logger of the cache layer; HIT/MISS/SET/DELETE lines are emitted at DEBUG.
CACHE_LOGGER = "orgdesk.infrastructure.cache"


def setup_logging() -> None:
    """Configure stdout logging for the process.

    The root level is DEBUG when settings.debug is set, INFO otherwise.
    settings.cache_log_hits turns on the per-key cache trace on its own,
    so cache behaviour can be inspected in production without SQL echo or
    framework debug output. Call once from create_app().
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if settings.cache_log_hits:
        logging.getLogger(CACHE_LOGGER).setLevel(logging.DEBUG)
    # redis-py logs every reconnect attempt; the cache layer already reports failures.
    logging.getLogger("redis").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
