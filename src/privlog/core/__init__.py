"""
Core components of privlog: the journal and the ports it depends on.
"""
from .clock import SystemTimestamp, TimestampSource
from .journal import Journal, JournalConfig
from .models import PrivateTxStatus, TransactionLog, ValidatorLog
from .serializer import FileLogsSerializer, LogsSerializer, MemoryLogsSerializer

__all__ = [
    "Journal",
    "JournalConfig",
    "TransactionLog",
    "ValidatorLog",
    "PrivateTxStatus",
    "LogsSerializer",
    "FileLogsSerializer",
    "MemoryLogsSerializer",
    "TimestampSource",
    "SystemTimestamp",
]
