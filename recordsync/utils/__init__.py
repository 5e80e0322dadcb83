"""Utility modules for recordsync"""

from .debounce import Debouncer
from .logging import configure_logging

__all__ = ['Debouncer', 'configure_logging']
