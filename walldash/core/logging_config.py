"""
Central logging configuration for walldash.

Keeps parser diagnostics visible while holding chatty third-party loggers
(HTTP client, event loop) at WARNING.
"""

import logging
import os
from typing import Optional

# Third-party loggers that flood DEBUG output during feed fetches
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "charset_normalizer")

WALLDASH_MODULES = (
    "walldash",
    "walldash.tabular.billing",
    "walldash.tabular.sheet_sections",
    "walldash.calendar.ics_events",
    "walldash.core.http_client",
    "walldash.sources",
)


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for walldash.

    Args:
        debug_mode: Whether to enable debug logging for walldash modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        WALLDASH_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        WALLDASH_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("WALLDASH_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("WALLDASH_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler when nothing is configured yet (keeps the colorlog one)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = {name: logging.WARNING for name in NOISY_LOGGERS}
    module_level = logging.DEBUG if final_debug else logging.INFO
    for module in WALLDASH_MODULES:
        logger_config[module] = module_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for walldash modules")
    else:
        root_logger.debug("Standard logging configuration applied")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ("walldash", *NOISY_LOGGERS[:2]):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
