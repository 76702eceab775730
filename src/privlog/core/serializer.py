"""
Persistence backends for the journal.

A LogsSerializer reads a full snapshot of transaction logs and writes one
back. It owns the format, never the policy: retention and capacity are the
journal's business.

Backends register themselves by type name:

    ```python
    class MySerializer(LogsSerializer, serializer_type="my_type"):
        def read_logs(self) -> List[TransactionLog]:
            ...

        def flush_logs(self, logs: Mapping[bytes, TransactionLog]) -> None:
            ...
    ```
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Type, Union

from pydantic import ValidationError

from privlog.core.models import TransactionLog, logs_from_json, logs_to_json
from privlog.utility.exceptions import ConfigError, JournalReadError, JournalWriteError
from privlog.utility.logger import get_logger

LOG_FILE_NAME = "private_tx.log"


class LogsSerializer(ABC):
    """Base class for journal persistence backends."""

    _registry: Dict[str, Type["LogsSerializer"]] = {}

    def __init_subclass__(cls, serializer_type: str = None):
        super().__init_subclass__()
        if serializer_type:
            cls._registry[serializer_type] = cls

    @classmethod
    def registered_types(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, config) -> "LogsSerializer":
        """
        Create a serializer for a journal configuration.

        Args:
            config: JournalConfig (uses `serializer` and `logs_dir`)

        Raises:
            ConfigError: If the serializer type is not registered
        """
        serializer_type = config.serializer
        if serializer_type not in cls._registry:
            raise ConfigError(f"Unknown serializer type: {serializer_type}")
        return cls._registry[serializer_type].from_config(config)

    @classmethod
    def from_config(cls, config) -> "LogsSerializer":
        return cls()

    @abstractmethod
    def read_logs(self) -> List[TransactionLog]:
        """
        Read every stored log.

        Raises:
            JournalReadError: If the snapshot cannot be read or parsed
        """
        pass

    @abstractmethod
    def flush_logs(self, logs: Mapping[bytes, TransactionLog]) -> None:
        """
        Replace the stored snapshot with `logs`.

        Raises:
            JournalWriteError: If the snapshot cannot be written
        """
        pass


class FileLogsSerializer(LogsSerializer, serializer_type="file"):
    """
    Stores the journal as one JSON array in `<logs_dir>/private_tx.log`.

    Without a logs directory persistence is disabled: reads return nothing
    and flushes are dropped.
    """

    def __init__(self, logs_dir: Optional[Union[str, Path]] = None):
        self.logs_dir = Path(logs_dir) if logs_dir is not None else None
        self.logger = get_logger("privlog.serializer.file")

    @classmethod
    def from_config(cls, config) -> "FileLogsSerializer":
        return cls(config.logs_dir)

    @property
    def log_path(self) -> Optional[Path]:
        if self.logs_dir is None:
            return None
        return self.logs_dir / LOG_FILE_NAME

    def read_logs(self) -> List[TransactionLog]:
        log_path = self.log_path
        if log_path is None:
            self.logger.warning("Logs path is not defined")
            return []

        try:
            content = log_path.read_bytes()
        except OSError as e:
            self.logger.debug(f"Cannot open logs file: {e}")
            raise JournalReadError(
                f"Cannot open logs file: {e}", path=str(log_path)
            ) from e

        try:
            return logs_from_json(content)
        except (ValueError, ValidationError, RecursionError) as e:
            self.logger.error(f"Cannot deserialize logs from file: {e}")
            raise JournalReadError(
                f"Cannot deserialize logs from file: {log_path}", path=str(log_path)
            ) from e

    def flush_logs(self, logs: Mapping[bytes, TransactionLog]) -> None:
        if not logs:
            # Do not create empty file
            return

        log_path = self.log_path
        if log_path is None:
            self.logger.warning("Logs path is not defined")
            return

        try:
            log_path.write_bytes(logs_to_json(logs.values()))
        except OSError as e:
            self.logger.debug(f"Cannot open logs file: {e}")
            raise JournalWriteError(
                f"Cannot write logs file: {e}", path=str(log_path)
            ) from e

        self.logger.debug(f"Wrote {len(logs)} logs to {log_path}")


class MemoryLogsSerializer(LogsSerializer, serializer_type="memory"):
    """
    Keeps the snapshot as a JSON string in memory.

    Flushes sort entries by hash so the stored text is deterministic, which
    makes it convenient for embedding and for comparing output in tests.
    """

    def __init__(self, source: str = ""):
        self._log = source

    @property
    def log(self) -> str:
        return self._log

    def read_logs(self) -> List[TransactionLog]:
        if not self._log:
            return []
        try:
            return logs_from_json(self._log)
        except (ValueError, ValidationError, RecursionError) as e:
            raise JournalReadError("Cannot deserialize logs from memory") from e

    def flush_logs(self, logs: Mapping[bytes, TransactionLog]) -> None:
        ordered = [logs[tx_hash] for tx_hash in sorted(logs)]
        self._log = logs_to_json(ordered).decode("utf-8")
