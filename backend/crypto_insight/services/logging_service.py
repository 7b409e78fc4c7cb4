"""Process-wide logging setup."""

import logging
from typing import Any, Dict

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("aiohttp.access", "httpx", "httpcore")


def setup_logging(config: Dict[str, Any]) -> None:
    """Configure the root logger from the ``logging`` config section.

    Args:
        config: Effective configuration dictionary
    """
    section = config.get("logging", {}) or {}
    level_name = str(section.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=section.get("format") or DEFAULT_FORMAT,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug(f"Logging configured at {level_name}")
