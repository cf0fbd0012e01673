"""
WiFi capture ingestion.

Parses airodump-ng CSV dumps, resolves station organizations from the IEEE
registries and keeps the latest result available for queries.
"""

from .constants import (
    CLIENT_SECTION_MARKER,
    DEFAULT_RECENCY_MINUTES,
    DEFAULT_REFRESH_INTERVAL,
    LOCAL_ORGANIZATION,
    NOT_ASSOCIATED,
    normalize_mac,
)
from .models import AccessPoint, Client, Snapshot
from .oui import OrganizationRegistry, is_locally_administered, load_registry, parse_registry
from .parsers import AirodumpCsvParser, DumpFormatError, parse_airodump_csv, parse_airodump_text
from .recency import filter_recent_clients, parse_window_minutes
from .refresher import SnapshotRefresher, get_refresher, start_refresher, stop_refresher
from .snapshot import SnapshotStore, get_snapshot_store, reset_snapshot_store

__all__ = [
    # Constants
    'CLIENT_SECTION_MARKER',
    'DEFAULT_RECENCY_MINUTES',
    'DEFAULT_REFRESH_INTERVAL',
    'LOCAL_ORGANIZATION',
    'NOT_ASSOCIATED',
    'normalize_mac',
    # Models
    'AccessPoint',
    'Client',
    'Snapshot',
    # Organization lookup
    'OrganizationRegistry',
    'is_locally_administered',
    'load_registry',
    'parse_registry',
    # Parsing
    'AirodumpCsvParser',
    'DumpFormatError',
    'parse_airodump_csv',
    'parse_airodump_text',
    # Queries
    'filter_recent_clients',
    'parse_window_minutes',
    # Refresh
    'SnapshotRefresher',
    'get_refresher',
    'start_refresher',
    'stop_refresher',
    # Store
    'SnapshotStore',
    'get_snapshot_store',
    'reset_snapshot_store',
]
