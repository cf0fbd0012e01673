"""
WiFi data models for parsed capture dumps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .constants import NOT_ASSOCIATED


@dataclass(frozen=True)
class AccessPoint:
    """Access point row from the dump's AP table."""

    bssid: str
    first_seen: datetime
    last_seen: datetime
    channel: int
    speed: str = ''
    privacy: str = ''
    authentication: str = ''
    power: int = 0
    essid: str = ''

    @property
    def is_hidden(self) -> bool:
        """Check if the network does not broadcast its name."""
        return not self.essid or self.essid.strip('\x00 ') == ''

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'bssid': self.bssid,
            'first_seen': self.first_seen.isoformat(),
            'last_seen': self.last_seen.isoformat(),
            'channel': self.channel,
            'speed': self.speed,
            'privacy': self.privacy,
            'authentication': self.authentication,
            'power': self.power,
            'essid': self.essid,
            'is_hidden': self.is_hidden,
        }


@dataclass(frozen=True)
class Client:
    """Station row from the dump's client table."""

    mac: str
    first_seen: datetime
    last_seen: datetime
    power: int = 0
    packets: int = 0
    bssid: str = NOT_ASSOCIATED
    probes: str = ''
    organization: str = ''

    @property
    def is_associated(self) -> bool:
        return bool(self.bssid) and self.bssid != NOT_ASSOCIATED

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'mac': self.mac,
            'first_seen': self.first_seen.isoformat(),
            'last_seen': self.last_seen.isoformat(),
            'power': self.power,
            'packets': self.packets,
            'bssid': self.bssid,
            'is_associated': self.is_associated,
            'probes': self.probes,
            'organization': self.organization,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    One refresh generation: the AP and client lists parsed from a single dump.

    Snapshots are never modified after creation; the store swaps whole
    snapshots so readers always see both lists from the same cycle.
    """

    access_points: tuple[AccessPoint, ...] = field(default_factory=tuple)
    clients: tuple[Client, ...] = field(default_factory=tuple)
    generation: int = 0
    published_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.access_points and not self.clients

    def to_summary_dict(self) -> dict:
        """Compact dictionary for status views."""
        return {
            'generation': self.generation,
            'published_at': self.published_at.isoformat() if self.published_at else None,
            'access_point_count': len(self.access_points),
            'client_count': len(self.clients),
        }
