"""
Custom exceptions for privlog - clear, actionable error handling.

privlog keeps its exception surface small. The journal itself never lets a
persistence problem escape: serializers raise these exceptions, and the
journal catches them at load and flush time and turns them into warnings.

Exception Hierarchy:
    PrivlogError (base)
    ├── JournalError
    │   ├── JournalReadError - Stored snapshot is unreadable or malformed
    │   └── JournalWriteError - Snapshot could not be written
    └── ConfigError - Configuration errors

Usage Guidelines:
    - Always use exception chaining (`raise JournalReadError(...) from e`) when
      wrapping I/O, JSON or validation errors to preserve the original traceback.
    - Persistence errors are terminal for the single attempt that raised them.
      Nothing in privlog retries them.
"""


class PrivlogError(Exception):
    """Base exception for all privlog errors."""

    pass


class JournalError(PrivlogError):
    """Base exception for journal persistence errors."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.context = kwargs


class JournalReadError(JournalError):
    """Error reading the persisted journal snapshot."""

    pass


class JournalWriteError(JournalError):
    """Error writing the journal snapshot."""

    pass


class ConfigError(PrivlogError):
    """Raised when there's an error in configuration."""

    pass
