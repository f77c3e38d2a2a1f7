"""Console logging for the cartledger CLIs.

Log records go to stderr so that the JSON the commands print on stdout
can be piped without filtering.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: int | str) -> int:
    """Turn a level name such as ``"debug"`` or a numeric level into an int.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    levels = logging.getLevelNamesMapping()
    if name not in levels:
        raise ValueError(f"Unknown log level: {level!r}")
    return levels[name]


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "cartledger",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach the cartledger console handler to a logger and set its level.

    Calling it again only updates the level, so the CLIs can configure
    logging early and re-apply the configured level once settings load.

    Returns:
        The configured logger.
    """
    resolved = resolve_level(level)
    logger = logging.getLogger(module_name)
    logger.setLevel(resolved)

    for handler in logger.handlers:
        if getattr(handler, "_cartledger_console", False):
            handler.setLevel(resolved)
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._cartledger_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger
