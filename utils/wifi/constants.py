"""
WiFi capture constants.

Column layouts and markers for airodump-ng CSV dumps, plus the IEEE
registry line formats used for organization lookup.
"""

from __future__ import annotations

import re

# =============================================================================
# AIRODUMP-NG CSV LAYOUT
# =============================================================================

# Header line that opens the station table; everything above it is the AP table
CLIENT_SECTION_MARKER = (
    'Station MAC, First time seen, Last time seen, Power, # packets, BSSID, Probed ESSIDs'
)

# Timestamps are written in the capture host's local time
AIRODUMP_TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

# Minimum columns for a usable row
AP_MIN_COLUMNS = 14
CLIENT_MIN_COLUMNS = 7

# Access point table columns
AP_COL_BSSID = 0
AP_COL_FIRST_SEEN = 1
AP_COL_LAST_SEEN = 2
AP_COL_CHANNEL = 3
AP_COL_SPEED = 4
AP_COL_PRIVACY = 5
AP_COL_AUTH = 7
AP_COL_POWER = 8
AP_COL_ESSID = 13

# Station table columns
CLIENT_COL_MAC = 0
CLIENT_COL_FIRST_SEEN = 1
CLIENT_COL_LAST_SEEN = 2
CLIENT_COL_POWER = 3
CLIENT_COL_PACKETS = 4
CLIENT_COL_BSSID = 5
CLIENT_COL_PROBES = 6

# BSSID value for stations not associated with any AP
NOT_ASSOCIATED = '(not associated)'

# =============================================================================
# ORGANIZATION REGISTRIES
# =============================================================================

REGISTRY_LINE_MARKER = '(hex)'

# oui.txt: "00-1A-2B   (hex)\t\tAyecom Technology Co., Ltd."
OUI_SEPARATOR = '   (hex)\t\t'

# cid.txt uses fixed-width space padding around the marker
CID_SEPARATOR = ' ' * 22 + '(hex)' + ' ' * 25

# XX-XX-XX
PREFIX_LENGTH = 8

# Organization for locally administered addresses missing from cid.txt
LOCAL_ORGANIZATION = 'LOCAL'

# Universal/Local bit of the first address byte
UL_BIT_MASK = 0x02

# =============================================================================
# REFRESH / QUERY DEFAULTS
# =============================================================================

DEFAULT_REFRESH_INTERVAL = 10.0  # seconds
DEFAULT_RECENCY_MINUTES = 60
REFRESHER_STOP_TIMEOUT = 5.0  # seconds


CANONICAL_MAC_RE = re.compile(r'[0-9a-f]{2}(-[0-9a-f]{2}){5}')


def normalize_mac(mac: str) -> str:
    """
    Canonical hardware address form: lower-case byte pairs joined by '-'.

    Raises:
        ValueError: If the result is not six hex byte pairs.
    """
    normalized = mac.strip().replace(':', '-').lower()
    if not CANONICAL_MAC_RE.fullmatch(normalized):
        raise ValueError(f"invalid hardware address {mac!r}")
    return normalized
