"""I/O utilities for yapCSG."""

from .stl import read_stl, write_stl

__all__ = ['read_stl', 'write_stl']
