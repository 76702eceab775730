"""
A bounded, persistent journal of private transaction lifecycles.
"""
from .core import (
    FileLogsSerializer,
    Journal,
    JournalConfig,
    LogsSerializer,
    MemoryLogsSerializer,
    PrivateTxStatus,
    SystemTimestamp,
    TimestampSource,
    TransactionLog,
    ValidatorLog,
)

__all__ = [
    # Core components
    "Journal",
    "LogsSerializer",
    "FileLogsSerializer",
    "MemoryLogsSerializer",
    "TimestampSource",
    "SystemTimestamp",
    # Data model
    "TransactionLog",
    "ValidatorLog",
    "PrivateTxStatus",
    # Config classes
    "JournalConfig",
]
