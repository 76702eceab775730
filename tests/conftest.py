"""
Common test fixtures and configuration.

This module provides shared fixtures and utilities:
- Deterministic clocks so timestamp assertions are exact
- Sample hashes and addresses in the hex format used by persisted logs
- Log capture for privlog loggers (they don't propagate to the root logger)
"""
import logging
import shutil
import sys
import tempfile
import threading
from pathlib import Path

import pytest

# Add src directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from privlog.core.clock import TimestampSource  # noqa: E402
from privlog.utility.logger import get_logger  # noqa: E402

TX_HASH = "0x64f648ca7ae7f4138014f860ae56164d8d5732969b1cea54d8be9d144d8aa6f6"
OTHER_TX_HASH = "0x63c715e88f7291e66069302f6fcbb4f28a19ef5d7cbd1832d0c01e221c0061c6"
PUBLIC_TX_HASH = "0x69b9c691ede7993effbcc88911c309af1c82be67b04b3882dd446b808ae146da"
OTHER_PUBLIC_TX_HASH = (
    "0xde2209a8635b9cab9eceb67928b217c70ab53f6498e5144492ec01e6f43547d7"
)
VALIDATOR = "0x82a978b3f5962a5b0957d9ee9eef472ee55b42f1"
OTHER_VALIDATOR = "0x7ffbe3512782069be388f41be4d8eb350672d3a5"


def make_hash(n: int) -> bytes:
    """Build a distinct 32-byte hash from an integer."""
    return n.to_bytes(32, "big")


class CounterTimestamp(TimestampSource):
    """Returns 0, 1, 2, ... (or from `start`) on successive reads."""

    def __init__(self, start: int = 0):
        self.counter = start
        self._lock = threading.Lock()

    def current_timestamp(self) -> int:
        with self._lock:
            current = self.counter
            self.counter += 1
            return current


class FixedTimestamp(TimestampSource):
    """Always returns the same timestamp until `now` is changed."""

    def __init__(self, now: int = 0):
        self.now = now

    def current_timestamp(self) -> int:
        return self.now


@pytest.fixture(autouse=True)
def setup_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)
    yield


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def counter_clock():
    """Self-incrementing clock starting at 0."""
    return CounterTimestamp()


@pytest.fixture
def capture_logs(caplog):
    """
    Attach caplog to a privlog logger by name.

    privlog loggers don't propagate, so caplog's root handler never sees
    them without this.
    """
    attached = []

    def attach(name: str):
        # Set up privlog handlers first so they aren't skipped
        logger = get_logger(name).logger
        handler = caplog.handler
        logger.addHandler(handler)
        attached.append((logger, handler))
        return caplog

    yield attach

    for logger, handler in attached:
        logger.removeHandler(handler)
