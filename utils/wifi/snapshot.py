"""
In-memory store for the latest parsed capture.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable, Optional

from .models import AccessPoint, Client, Snapshot

# Global store instance
_store_instance: Optional['SnapshotStore'] = None
_store_lock = threading.Lock()


class SnapshotStore:
    """
    Holds the most recent Snapshot.

    The refresher is the only writer. Each publish builds a new immutable
    Snapshot and swaps the reference, so readers never see lists from two
    different refresh cycles.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = Snapshot()

    def publish(
        self,
        access_points: Iterable[AccessPoint],
        clients: Iterable[Client],
    ) -> Snapshot:
        """Replace the visible lists with a new generation."""
        access_points = tuple(access_points)
        clients = tuple(clients)
        with self._lock:
            snapshot = Snapshot(
                access_points=access_points,
                clients=clients,
                generation=self._snapshot.generation + 1,
                published_at=datetime.now().astimezone(),
            )
            self._snapshot = snapshot
        return snapshot

    def current(self) -> Snapshot:
        """Get the current snapshot (both lists from the same cycle)."""
        with self._lock:
            return self._snapshot

    def current_access_points(self) -> list[AccessPoint]:
        return list(self.current().access_points)

    def current_clients(self) -> list[Client]:
        return list(self.current().clients)

    @property
    def generation(self) -> int:
        return self.current().generation


# =============================================================================
# Module-level functions
# =============================================================================

def get_snapshot_store() -> SnapshotStore:
    """Get or create the global snapshot store."""
    global _store_instance

    with _store_lock:
        if _store_instance is None:
            _store_instance = SnapshotStore()
        return _store_instance


def reset_snapshot_store():
    """Drop the global store; the next get creates an empty one."""
    global _store_instance

    with _store_lock:
        _store_instance = None
