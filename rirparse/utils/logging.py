# rirparse/utils/logging.py

from __future__ import annotations
import logging
import sys

_ROOT = "rirparse"
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger(_ROOT)
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``rirparse`` namespace.

    The namespace gets a single stderr handler the first time any logger is
    requested, so library modules and the CLI share one configuration.
    """
    _configure()
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)


def set_level(level: int) -> None:
    """Set the level for every ``rirparse`` logger (used by --verbose / --quiet)."""
    _configure()
    logging.getLogger(_ROOT).setLevel(level)
