"""
Journal implementation for tracking private transaction lifecycles.

The journal keeps one TransactionLog per private transaction in memory,
bounded by capacity, and persists the whole map as a single snapshot. The
snapshot is loaded once when the journal is built (dropping entries past the
retention window) and written once when the journal is closed.
"""
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from privlog.core.clock import SystemTimestamp, TimestampSource
from privlog.core.models import (
    AddressLike,
    HashLike,
    PrivateTxStatus,
    TransactionLog,
    ValidatorLog,
    parse_address,
    parse_hash,
    to_hex,
)
from privlog.core.rwlock import RWLock
from privlog.core.serializer import LogsSerializer
from privlog.utility.logger import get_logger

# 20 days
DEFAULT_RETENTION_SECONDS = 60 * 60 * 24 * 20
DEFAULT_MAX_ENTRIES = 1000


class JournalConfig(BaseModel):
    """
    Configuration for the journal.

    Leaving `logs_dir` unset disables persistence for the file serializer.
    """

    model_config = ConfigDict(extra="forbid")

    max_entries: int = Field(
        default=DEFAULT_MAX_ENTRIES,
        ge=1,
        description="Maximum number of transaction logs kept in memory",
    )
    retention_seconds: int = Field(
        default=DEFAULT_RETENTION_SECONDS,
        ge=1,
        description="Logs older than this are dropped when the journal loads",
    )
    logs_dir: Optional[str] = Field(
        default=None,
        description="Directory holding private_tx.log (None disables persistence)",
    )
    serializer: str = Field(
        default="file",
        description="Registered serializer type used by Journal.from_config",
    )

    @field_validator("serializer")
    @classmethod
    def validate_serializer(cls, v):
        """Validate serializer type against the registry."""
        valid_types = LogsSerializer.registered_types()
        if v not in valid_types:
            raise ValueError(f"Serializer must be one of {valid_types}, got '{v}'")
        return v


class Journal:
    """
    Thread-safe, bounded journal of private transaction logs.

    Every operation is atomic with respect to every other: mutations hold the
    map's write lock for the clock read and the update, lookups hold the read
    lock. No I/O happens under the lock.

    The journal must be closed exactly once to persist its state, either by
    calling `close()` or by using it as a context manager.

    Example:
        ```python
        serializer = FileLogsSerializer("/var/lib/node/private")
        with Journal(serializer, SystemTimestamp()) as journal:
            journal.create(tx_hash, [validator])
            journal.record_validation(tx_hash, validator)
            journal.record_deployment(tx_hash, public_tx_hash)
            log = journal.lookup(tx_hash)
        ```
    """

    def __init__(
        self,
        serializer: LogsSerializer,
        timestamp_source: TimestampSource,
        config: Optional[JournalConfig] = None,
        name: str = "private_tx",
    ):
        """
        Initialize the journal and load the persisted snapshot.

        A snapshot that cannot be read is reported as a warning and the
        journal starts empty.

        Args:
            serializer: Persistence backend, held for the journal's lifetime
            timestamp_source: Clock used for every timestamp the journal sets
            config: Capacity and retention settings (defaults if None)
            name: Journal name (for logging)
        """
        self.name = name
        self.config = config or JournalConfig()
        self.serializer = serializer
        self.timestamp_source = timestamp_source
        self.logger = get_logger(f"privlog.journal.{name}")

        self._logs: Dict[bytes, TransactionLog] = {}
        self._lock = RWLock()
        self._closed = False

        try:
            self._read_logs()
        except Exception as e:
            self.logger.warning(f"Cannot read logs: {e}")

    @classmethod
    def from_config(
        cls,
        config: JournalConfig,
        timestamp_source: Optional[TimestampSource] = None,
        name: str = "private_tx",
    ) -> "Journal":
        """Build a journal with the serializer named in `config`."""
        serializer = LogsSerializer.create(config)
        return cls(
            serializer,
            timestamp_source or SystemTimestamp(),
            config=config,
            name=name,
        )

    def __enter__(self) -> "Journal":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._logs)

    def __contains__(self, tx_hash) -> bool:
        tx_hash = parse_hash(tx_hash)
        with self._lock.read():
            return tx_hash in self._logs

    @property
    def closed(self) -> bool:
        return self._closed

    def lookup(self, tx_hash: HashLike) -> Optional[TransactionLog]:
        """Return a copy of the log for `tx_hash`, or None if it isn't tracked."""
        tx_hash = parse_hash(tx_hash)
        with self._lock.read():
            log = self._logs.get(tx_hash)
            return log.model_copy(deep=True) if log is not None else None

    def snapshot(self) -> Dict[bytes, TransactionLog]:
        """Return copies of all tracked logs keyed by transaction hash."""
        with self._lock.read():
            return {
                tx_hash: log.model_copy(deep=True)
                for tx_hash, log in self._logs.items()
            }

    def create(self, tx_hash: HashLike, validators: Iterable[AddressLike]) -> None:
        """
        Log the creation of a private transaction.

        An existing log for the same hash is replaced. When the journal is
        full, the log with the oldest creation timestamp is evicted first.

        Args:
            tx_hash: Hash of the originating signed transaction
            validators: Accounts expected to validate the transaction
        """
        tx_hash = parse_hash(tx_hash)
        accounts = dict.fromkeys(parse_address(account) for account in validators)
        validator_logs = [ValidatorLog(account=account) for account in accounts]

        evicted = None
        with self._lock.write():
            closed = self._closed
            if not closed:
                # Evict before inserting: at most max_entries, never max + 1
                full = len(self._logs) >= self.config.max_entries
                if full and tx_hash not in self._logs:
                    evicted = self._evict_oldest()
                self._logs[tx_hash] = TransactionLog(
                    tx_hash=tx_hash,
                    status=PrivateTxStatus.CREATED,
                    creation_timestamp=self.timestamp_source.current_timestamp(),
                    validators=validator_logs,
                )

        if closed:
            self._warn_closed("create", tx_hash)
            return
        if evicted is not None:
            self.logger.debug(f"Journal full, evicted oldest log {to_hex(evicted)}")
        self.logger.debug(
            f"Private tx {to_hex(tx_hash)} created "
            f"with {len(validator_logs)} validators"
        )

    def record_validation(self, tx_hash: HashLike, validator: AddressLike) -> None:
        """
        Log a validator's signature for a private transaction.

        The status moves to Validating whenever the transaction is tracked,
        even if it was already Deployed. The validator is only marked when it
        is one of the transaction's validators. Unknown transactions are
        ignored.
        """
        tx_hash = parse_hash(tx_hash)
        account = parse_address(validator)

        with self._lock.write():
            closed = self._closed
            log = None if closed else self._logs.get(tx_hash)
            if log is not None:
                log.status = PrivateTxStatus.VALIDATING
                validator_log = log.find_validator(account)
                if validator_log is not None:
                    validator_log.validated = True
                    validator_log.validation_timestamp = (
                        self.timestamp_source.current_timestamp()
                    )

        if closed:
            self._warn_closed("record_validation", tx_hash)
        elif log is not None:
            self.logger.debug(
                f"Signature from {to_hex(account)} added "
                f"for private tx {to_hex(tx_hash)}"
            )

    def record_deployment(
        self, tx_hash: HashLike, public_tx_hash: HashLike
    ) -> None:
        """Log the deployment of the public transaction. Unknown hashes are ignored."""
        tx_hash = parse_hash(tx_hash)
        public_tx_hash = parse_hash(public_tx_hash)

        with self._lock.write():
            closed = self._closed
            log = None if closed else self._logs.get(tx_hash)
            if log is not None:
                log.status = PrivateTxStatus.DEPLOYED
                log.deployment_timestamp = self.timestamp_source.current_timestamp()
                log.public_tx_hash = public_tx_hash

        if closed:
            self._warn_closed("record_deployment", tx_hash)
        elif log is not None:
            self.logger.debug(
                f"Private tx {to_hex(tx_hash)} deployed as {to_hex(public_tx_hash)}"
            )

    def close(self) -> None:
        """
        Flush all logs to the serializer.

        Only the first call flushes. A failed flush is reported as a warning;
        the logs are then lost, since nothing retries the write.
        """
        with self._lock.write():
            if self._closed:
                return
            self._closed = True
            logs = dict(self._logs)

        try:
            self.serializer.flush_logs(logs)
        except Exception as e:
            self.logger.warning(f"Cannot write logs: {e}")
            return

        if logs:
            self.logger.info(f"Flushed {len(logs)} private tx logs")

    def _read_logs(self) -> None:
        """Load the persisted snapshot, dropping logs past the retention window."""
        transaction_logs = self.serializer.read_logs()
        if not transaction_logs:
            return

        current_timestamp = self.timestamp_source.current_timestamp()
        retention = self.config.retention_seconds
        fresh_logs = [
            log
            for log in transaction_logs
            if current_timestamp - log.creation_timestamp < retention
        ]

        with self._lock.write():
            for log in fresh_logs:
                self._logs[log.tx_hash] = log
            evicted = 0
            while len(self._logs) > self.config.max_entries:
                self._evict_oldest()
                evicted += 1
            loaded = len(self._logs)

        dropped = len(transaction_logs) - len(fresh_logs)
        self.logger.info(
            f"Loaded {loaded} private tx logs "
            f"({dropped} expired, {evicted} over capacity)"
        )

    def _evict_oldest(self) -> bytes:
        """Remove the log with the oldest creation timestamp (write lock held)."""
        oldest = min(self._logs.values(), key=lambda log: log.creation_timestamp)
        del self._logs[oldest.tx_hash]
        return oldest.tx_hash

    def _warn_closed(self, operation: str, tx_hash: bytes) -> None:
        self.logger.warning(
            f"Journal is closed, ignoring {operation} for {to_hex(tx_hash)}"
        )
