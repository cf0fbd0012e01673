"""
Configuration for netnet.

Every setting can be overridden with a NETNET_<NAME> environment variable.
Command line flags in app.py take precedence over both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

VERSION = '1.2.0'

BASE_DIR = Path(__file__).resolve().parent


def _get_env(key: str, default: str) -> str:
    """Read a NETNET_ prefixed environment variable."""
    return os.environ.get(f'NETNET_{key}', default)


def _get_env_int(key: str, default: int) -> int:
    try:
        return int(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    try:
        return float(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    value = _get_env(key, '').strip().lower()
    if not value:
        return default
    return value in ('1', 'true', 'yes', 'on')


# Capture input
DUMP_FILE = _get_env('DUMP_FILE', 'dump-01.csv')

# IEEE registries (http://standards-oui.ieee.org/oui.txt, .../cid/cid.txt)
OUI_FILE = _get_env('OUI_FILE', 'oui.txt')
CID_FILE = _get_env('CID_FILE', 'cid.txt')

# Web server
HOST = _get_env('HOST', '0.0.0.0')
PORT = _get_env_int('PORT', 12121)
PUBLIC_DIR = _get_env('PUBLIC_DIR', str(BASE_DIR / 'public'))
DEBUG = _get_env_bool('DEBUG', False)

# Refresh cycle, seconds between dump re-reads
REFRESH_INTERVAL = _get_env_float('REFRESH_INTERVAL', 10.0)

# Client recency window for /clients, minutes
DEFAULT_RECENCY_MINUTES = _get_env_int('RECENCY_MINUTES', 60)

# Logging
LOG_LEVEL = getattr(logging, _get_env('LOG_LEVEL', 'INFO').upper(), logging.INFO)
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
