"""
Utility functions and classes for privlog.
"""
from .exceptions import (
    ConfigError,
    JournalError,
    JournalReadError,
    JournalWriteError,
    PrivlogError,
)

__all__ = [
    "PrivlogError",
    "JournalError",
    "JournalReadError",
    "JournalWriteError",
    "ConfigError",
]
