"""
Timestamp sources for the journal.

The journal never reads the wall clock directly; it asks the
TimestampSource it was built with. Tests swap in a deterministic source to
make timestamp assertions exact.
"""
import time
from abc import ABC, abstractmethod


class TimestampSource(ABC):
    """Supplies the current time as whole seconds."""

    @abstractmethod
    def current_timestamp(self) -> int:
        """Return the current timestamp in seconds."""
        pass


class SystemTimestamp(TimestampSource):
    """Wall-clock seconds since the Unix epoch, never negative."""

    def current_timestamp(self) -> int:
        try:
            now = time.time()
        except OSError:
            return 0
        return max(int(now), 0)
