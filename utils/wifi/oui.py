"""
Organization lookup for hardware addresses.

Builds prefix -> organization tables from the IEEE registries:
- oui.txt: globally assigned manufacturer prefixes (OUI)
- cid.txt: company IDs used in locally administered addresses (CID)

The universal/local bit of the first address byte decides which table applies.
See https://en.wikipedia.org/wiki/MAC_address
"""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from utils.logging import get_logger

from .constants import (
    CID_SEPARATOR,
    LOCAL_ORGANIZATION,
    OUI_SEPARATOR,
    PREFIX_LENGTH,
    REGISTRY_LINE_MARKER,
    UL_BIT_MASK,
)

logger = get_logger('netnet.oui')

HEX_OCTET_RE = re.compile(r'[0-9A-Fa-f]{2}')


def is_locally_administered(mac: str) -> bool:
    """
    Check the universal/local bit of an address.

    Args:
        mac: Address in canonical or colon form.

    Returns:
        True if the address is locally administered.

    Raises:
        ValueError: If the first byte is not valid hex.
    """
    first_octet = mac[:2]
    if not HEX_OCTET_RE.fullmatch(first_octet):
        raise ValueError(f"first octet of {mac!r} is not hex")
    first_byte = int(first_octet, 16)
    return bool(first_byte & UL_BIT_MASK)


def parse_registry(text: str, separator: str) -> dict[str, str]:
    """
    Parse IEEE registry text into a prefix -> organization mapping.

    Only lines carrying the "(hex)" marker are considered. Each one must
    split into exactly a prefix and a name on the given separator.
    """
    mapping: dict[str, str] = {}
    for line in text.splitlines():
        if REGISTRY_LINE_MARKER not in line:
            continue
        parts = line.split(separator)
        if len(parts) != 2:
            continue
        prefix = parts[0].strip().upper()
        if len(prefix) != PREFIX_LENGTH:
            continue
        mapping[prefix] = parts[1].strip()
    return mapping


def load_registry(path: str | Path, separator: str) -> dict[str, str]:
    """Load a registry file; an unreadable file yields an empty table."""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        logger.warning(f"Registry {path} unavailable, lookups will miss: {e}")
        return {}

    mapping = parse_registry(text, separator)
    logger.info(f"Loaded {len(mapping)} entries from {path}")
    return mapping


class OrganizationRegistry:
    """Read-only OUI and CID tables built once at startup."""

    def __init__(
        self,
        oui: Optional[Mapping[str, str]] = None,
        cid: Optional[Mapping[str, str]] = None,
    ):
        self._oui = MappingProxyType(dict(oui or {}))
        self._cid = MappingProxyType(dict(cid or {}))

    @classmethod
    def from_files(cls, oui_path: str | Path, cid_path: str | Path) -> 'OrganizationRegistry':
        return cls(
            oui=load_registry(oui_path, OUI_SEPARATOR),
            cid=load_registry(cid_path, CID_SEPARATOR),
        )

    @property
    def oui(self) -> Mapping[str, str]:
        return self._oui

    @property
    def cid(self) -> Mapping[str, str]:
        return self._cid

    def __len__(self) -> int:
        return len(self._oui) + len(self._cid)

    def lookup_oui(self, prefix: str) -> str:
        return self._oui.get(prefix.upper(), '')

    def lookup_cid(self, prefix: str) -> str:
        return self._cid.get(prefix.upper(), '')

    def resolve(self, mac: str) -> str:
        """
        Resolve the organization for a canonical address.

        Locally administered addresses are looked up in the CID table and
        fall back to "LOCAL"; all others use the OUI table and fall back to ''.

        Raises:
            ValueError: If the address cannot be classified.
        """
        prefix = mac[:PREFIX_LENGTH]
        if is_locally_administered(mac):
            return self.lookup_cid(prefix) or LOCAL_ORGANIZATION
        return self.lookup_oui(prefix)

    def stats(self) -> dict:
        return {
            'oui_entries': len(self._oui),
            'cid_entries': len(self._cid),
        }
