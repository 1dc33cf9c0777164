"""Logging utilities for yapCSG.

Provides a consistent logger hierarchy under the ``yapcsg`` namespace
without modifying the process root logger.  Library code obtains its
loggers via :func:`get_logger`; applications opt in to output with
:func:`configure_logging`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')
_ROOT = 'yapcsg'


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> logging.Logger:
    """Attach a single stdout handler to the ``yapcsg`` logger and set
    its level.  Does not touch the process root logger."""
    root = logging.getLogger(_ROOT)
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.setLevel(_to_level(level))
    root.propagate = False
    return root


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the ``yapcsg`` namespace.

    Without ``level`` the logger inherits from the ``yapcsg`` parent
    configured via :func:`configure_logging`.
    """
    if name != _ROOT and not name.startswith(_ROOT + '.'):
        name = _ROOT + '.' + name
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
