"""
Periodic dump refresh.

Re-reads the airodump-ng CSV on a fixed interval and publishes each
successful parse into the snapshot store. A failed cycle keeps the
previous snapshot and waits for the next tick.
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from utils.logging import refresh_logger as logger

from .constants import DEFAULT_REFRESH_INTERVAL, REFRESHER_STOP_TIMEOUT
from .oui import OrganizationRegistry
from .parsers.airodump import AirodumpCsvParser, DumpFormatError
from .snapshot import SnapshotStore, get_snapshot_store

# Global refresher instance
_refresher_instance: Optional['SnapshotRefresher'] = None
_refresher_lock = threading.Lock()


class SnapshotRefresher:
    """Background thread that keeps the snapshot store in sync with the dump file."""

    def __init__(
        self,
        dump_path: str | Path,
        store: Optional[SnapshotStore] = None,
        parser: Optional[AirodumpCsvParser] = None,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        """
        Initialize refresher.

        Args:
            dump_path: airodump-ng CSV file to poll.
            store: Store to publish into (defaults to the global store).
            parser: Configured parser (defaults to one with empty registries).
            interval: Seconds to wait between cycles.
        """
        self.dump_path = Path(dump_path)
        self.store = store or get_snapshot_store()
        self.parser = parser or AirodumpCsvParser()
        self.interval = interval

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        # State
        self.cycles = 0
        self.last_error: Optional[str] = None
        self.last_refresh_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_once(self) -> bool:
        """
        Run one read/parse/publish cycle.

        Returns:
            True if a new snapshot was published.
        """
        self.cycles += 1
        try:
            text = self.dump_path.read_text(encoding='utf-8', errors='replace')
            access_points, clients = self.parser.parse(text)
        except OSError as e:
            return self._fail(f"Cannot read dump {self.dump_path}: {e}")
        except DumpFormatError as e:
            return self._fail(f"Malformed dump {self.dump_path}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error refreshing {self.dump_path}")
            self.last_error = str(e)
            return False

        snapshot = self.store.publish(access_points, clients)
        self.last_error = None
        self.last_refresh_at = snapshot.published_at
        logger.debug(
            f"Published generation {snapshot.generation}: "
            f"{len(snapshot.access_points)} APs, {len(snapshot.clients)} clients"
        )
        return True

    def _fail(self, message: str) -> bool:
        logger.warning(f"{message}; keeping previous snapshot")
        self.last_error = message
        return False

    def run(self):
        """Refresh until stopped."""
        logger.info(f"Refreshing from {self.dump_path} every {self.interval}s")
        while not self._stop_event.is_set():
            self.refresh_once()
            self._stop_event.wait(self.interval)
        logger.info("Refresher stopped")

    def start(self) -> bool:
        """
        Start refreshing in a daemon thread.

        Returns:
            True if the thread is running.
        """
        with self._lock:
            if self.is_running:
                return True

            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self.run,
                name='netnet-refresher',
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self, timeout: float = REFRESHER_STOP_TIMEOUT) -> bool:
        """
        Stop the refresh thread.

        Returns:
            True if the thread has exited.
        """
        with self._lock:
            self._stop_event.set()
            if self._thread:
                self._thread.join(timeout=timeout)
                if self._thread.is_alive():
                    logger.warning("Refresher thread did not exit in time")
                    return False
                self._thread = None
            return True

    def get_status(self) -> dict:
        return {
            'running': self.is_running,
            'dump_file': str(self.dump_path),
            'interval': self.interval,
            'cycles': self.cycles,
            'last_refresh_at': self.last_refresh_at.isoformat() if self.last_refresh_at else None,
            'last_error': self.last_error,
        }


# =============================================================================
# Module-level functions
# =============================================================================

def start_refresher(
    dump_path: str | Path,
    registry: Optional[OrganizationRegistry] = None,
    interval: float = DEFAULT_REFRESH_INTERVAL,
) -> SnapshotRefresher:
    """
    Create and start the global refresher, replacing any previous one.

    Args:
        dump_path: airodump-ng CSV file to poll.
        registry: Organization registry used for client enrichment.
        interval: Seconds between cycles.
    """
    global _refresher_instance

    with _refresher_lock:
        if _refresher_instance:
            _refresher_instance.stop()
        _refresher_instance = SnapshotRefresher(
            dump_path,
            store=get_snapshot_store(),
            parser=AirodumpCsvParser(registry),
            interval=interval,
        )
        _refresher_instance.start()
        return _refresher_instance


def get_refresher() -> Optional[SnapshotRefresher]:
    """Get the global refresher, if one was started."""
    return _refresher_instance


def stop_refresher():
    """Stop and drop the global refresher."""
    global _refresher_instance

    with _refresher_lock:
        if _refresher_instance:
            _refresher_instance.stop()
        _refresher_instance = None
