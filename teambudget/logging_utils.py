"""Mini README: Logging setup shared by every Team Budget module.

Structure:
    * LOG_FORMAT / DATE_FORMAT - the single line format used everywhere.
    * level_for_environment - map the settings environment label to a level.
    * configure_root_logger - attach one stream handler to the root logger.
    * get_logger - module logger factory used as ``get_logger(__name__)``.

The stream handler is attached once per process. Calling
``configure_root_logger`` again only changes the level, so the uvicorn
reloader and repeated imports never stack handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ENVIRONMENT_LEVELS = {
    "development": logging.DEBUG,
    "test": logging.WARNING,
    "production": logging.INFO,
}

_handler: Optional[logging.Handler] = None


def level_for_environment(environment: str) -> int:
    """Return the log level for an environment label; unknown labels log at INFO."""

    return _ENVIRONMENT_LEVELS.get(environment.strip().lower(), logging.INFO)


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install the shared handler on first use and apply ``level``."""

    global _handler
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    if _handler is not None:
        return

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger for ``name`` once the shared handler is in place."""

    if _handler is None:
        configure_root_logger()
    return logging.getLogger(name)
