# -*- coding: utf-8 -*-
import logging as _logging
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("yapCSG")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
