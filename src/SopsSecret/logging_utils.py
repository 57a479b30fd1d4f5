"""Logging for the SopsSecret generator.

Kustomize reads the generated Secret from stdout, so diagnostics must
never land there. The namespace logger gets its own stderr handler and
does not depend on how (or whether) the root logger is configured.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "SopsSecret"
LOG_FORMAT = "%(name)s [%(levelname)s] %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Marker type so repeated configuration reuses one handler."""


def configure_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the ``SopsSecret`` logger for one generator run.

    Called once from the CLI entrypoint (``SopsSecret.cli.main``). Calling
    it again updates the level and re-targets the existing handler, which
    matters when ``sys.stderr`` was swapped (pytest capture).
    """

    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    target = stream if stream is not None else sys.stderr
    if target is sys.stdout:
        raise ValueError("stdout is reserved for the generated manifest")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    # Our handler is the only output; the root logger would print twice.
    logger.propagate = False

    handler = next((h for h in logger.handlers if isinstance(h, _StderrHandler)), None)
    if handler is None:
        handler = _StderrHandler(target)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(target)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the SopsSecret namespace."""

    if name is None:
        return logging.getLogger(LOGGER_NAME)
    # Module names already carry the package prefix
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
