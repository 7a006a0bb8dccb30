"""
Logger Utility
--------------

Provides :func:`get_logger`, the single entry point for obtaining a
logger inside the package.  All loggers hang below the
``locator_healing`` namespace so that a host test framework can tune
or silence self‑healing output with one ``logging.getLogger`` call.
The namespace root writes to stdout with timestamps, levels and
logger names; its level is read from the ``LOG_LEVEL`` environment
variable.
"""

import logging
import os
from functools import lru_cache

ROOT_LOGGER_NAME = "locator_healing"


@lru_cache(maxsize=1)
def _configure_root() -> logging.Logger:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s – %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))
    return root


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` nested under the package namespace.

    Module names that already start with ``locator_healing`` are used
    as is; class names and other short names become children of the
    namespace root (``locator_healing.LocatorCache``).
    """
    root = _configure_root()
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return root.getChild(name)


__all__ = ["get_logger", "ROOT_LOGGER_NAME"]
