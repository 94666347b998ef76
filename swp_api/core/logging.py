"""Logging configuration for the application."""

import logging
import sys

from swp_api.config import get_settings


def setup_logging() -> None:
    """Configure application-wide logging to stdout. DEBUG when settings.debug, else settings.log_level."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Client libraries are noisy at DEBUG
    logging.getLogger("elastic_transport").setLevel(max(level, logging.WARNING))
