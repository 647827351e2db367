"""
Logging helpers

Все stateful-модули получают logger через get_logger(); чистые math-модули
не логируют.
"""

import logging
import sys
from typing import Final

LOGGER_NAMESPACE: Final[str] = "marketplace"

LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module"""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Установка stdout handler на корневой logger пространства `marketplace`.

    Повторный вызов не дублирует handler, только меняет уровень.
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)

    if not any(getattr(h, "_marketplace_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._marketplace_handler = True
        root.addHandler(handler)

    return root
