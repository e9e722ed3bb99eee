"""Utility functions and helpers."""

from .validation import check_readable, load_source
from .logging import setup_logging

__all__ = ['check_readable', 'load_source', 'setup_logging']
