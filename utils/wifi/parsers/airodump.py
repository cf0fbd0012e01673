"""
Parser for airodump-ng CSV output.

airodump-ng writes two tables into one file: access points first, then
stations, separated by the station table's header line. Both tables have a
variable number of columns (probed ESSIDs are comma separated), so rows are
read with a plain CSV reader and mapped by position.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional

from utils.logging import parser_logger as logger

from ..constants import (
    AIRODUMP_TIME_FORMAT,
    AP_COL_AUTH,
    AP_COL_BSSID,
    AP_COL_CHANNEL,
    AP_COL_ESSID,
    AP_COL_FIRST_SEEN,
    AP_COL_LAST_SEEN,
    AP_COL_POWER,
    AP_COL_PRIVACY,
    AP_COL_SPEED,
    AP_MIN_COLUMNS,
    CLIENT_COL_BSSID,
    CLIENT_COL_FIRST_SEEN,
    CLIENT_COL_LAST_SEEN,
    CLIENT_COL_MAC,
    CLIENT_COL_PACKETS,
    CLIENT_COL_POWER,
    CLIENT_COL_PROBES,
    CLIENT_MIN_COLUMNS,
    CLIENT_SECTION_MARKER,
    NOT_ASSOCIATED,
    normalize_mac,
)
from ..models import AccessPoint, Client
from ..oui import OrganizationRegistry


class DumpFormatError(ValueError):
    """The dump does not have the expected two-table layout."""


def split_sections(text: str) -> tuple[str, str]:
    """
    Split a dump into its access point and station sections.

    Raises:
        DumpFormatError: If the station header line is missing.
    """
    ap_section, marker, client_section = text.partition(CLIENT_SECTION_MARKER)
    if not marker:
        raise DumpFormatError('Station table header not found in dump')
    return ap_section, client_section


def _rows(section: str) -> list[list[str]]:
    """Read non-blank CSV rows, fields stripped. Rows the reader rejects are skipped."""
    reader = csv.reader(io.StringIO(section), skipinitialspace=True)
    rows = []
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            logger.warning(f"Skipping unreadable row near line {reader.line_num}: {e}")
            continue
        fields = [f.strip() for f in row]
        if not any(fields):
            continue
        rows.append(fields)
    return rows


class AirodumpCsvParser:
    """
    Parse airodump-ng CSV dumps into access points and clients.

    Timestamps are interpreted in the local time zone unless a fixed
    ``tz`` is given. Malformed rows are skipped; they never produce
    partially filled records.
    """

    def __init__(
        self,
        registry: Optional[OrganizationRegistry] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.registry = registry if registry is not None else OrganizationRegistry()
        self.tz = tz

    def parse(self, text: str) -> tuple[list[AccessPoint], list[Client]]:
        """
        Parse a full dump.

        Returns:
            Tuple of (access_points, clients).

        Raises:
            DumpFormatError: If the station header line is missing.
        """
        ap_section, client_section = split_sections(text)
        return self.parse_access_points(ap_section), self.parse_clients(client_section)

    def parse_access_points(self, section: str) -> list[AccessPoint]:
        rows = _rows(section)
        # First row is the "BSSID, First time seen, ..." header
        rows = rows[1:]

        access_points = []
        skipped = 0
        for row in rows:
            if len(row) < AP_MIN_COLUMNS:
                logger.warning(f"Skipping AP row with {len(row)} columns: {row}")
                skipped += 1
                continue
            try:
                access_points.append(self._parse_access_point(row))
            except ValueError as e:
                logger.warning(f"Skipping unparseable AP row {row[AP_COL_BSSID]}: {e}")
                skipped += 1

        logger.debug(f"Parsed {len(access_points)} access points, skipped {skipped}")
        return access_points

    def parse_clients(self, section: str) -> list[Client]:
        clients = []
        skipped = 0
        for row in _rows(section):
            if len(row) < CLIENT_MIN_COLUMNS:
                logger.warning(f"Skipping client row with {len(row)} columns: {row}")
                skipped += 1
                continue
            try:
                clients.append(self._parse_client(row))
            except ValueError as e:
                logger.warning(f"Skipping unparseable client row {row[CLIENT_COL_MAC]}: {e}")
                skipped += 1

        logger.debug(f"Parsed {len(clients)} clients, skipped {skipped}")
        return clients

    def _parse_time(self, value: str) -> datetime:
        parsed = datetime.strptime(value, AIRODUMP_TIME_FORMAT)
        if self.tz is not None:
            return parsed.replace(tzinfo=self.tz)
        # Naive datetimes are treated as local time by astimezone()
        return parsed.astimezone()

    def _parse_access_point(self, row: list[str]) -> AccessPoint:
        return AccessPoint(
            bssid=normalize_mac(row[AP_COL_BSSID]),
            first_seen=self._parse_time(row[AP_COL_FIRST_SEEN]),
            last_seen=self._parse_time(row[AP_COL_LAST_SEEN]),
            channel=int(row[AP_COL_CHANNEL]),
            speed=row[AP_COL_SPEED],
            privacy=row[AP_COL_PRIVACY],
            authentication=row[AP_COL_AUTH],
            power=int(row[AP_COL_POWER]),
            essid=row[AP_COL_ESSID],
        )

    def _parse_client(self, row: list[str]) -> Client:
        mac = normalize_mac(row[CLIENT_COL_MAC])

        packets = int(row[CLIENT_COL_PACKETS])
        if packets < 0:
            raise ValueError(f"negative packet count {packets}")

        bssid = row[CLIENT_COL_BSSID]
        if bssid != NOT_ASSOCIATED:
            bssid = normalize_mac(bssid)

        probes = ','.join(p for p in row[CLIENT_COL_PROBES:] if p)

        return Client(
            mac=mac,
            first_seen=self._parse_time(row[CLIENT_COL_FIRST_SEEN]),
            last_seen=self._parse_time(row[CLIENT_COL_LAST_SEEN]),
            power=int(row[CLIENT_COL_POWER]),
            packets=packets,
            bssid=bssid,
            probes=probes,
            organization=self.registry.resolve(mac),
        )


def parse_airodump_text(
    text: str,
    registry: Optional[OrganizationRegistry] = None,
) -> tuple[list[AccessPoint], list[Client]]:
    """Parse dump text with a default-configured parser."""
    return AirodumpCsvParser(registry).parse(text)


def parse_airodump_csv(
    path: str | Path,
    registry: Optional[OrganizationRegistry] = None,
) -> tuple[list[AccessPoint], list[Client]]:
    """
    Read and parse an airodump-ng CSV file.

    Raises:
        OSError: If the file cannot be read.
        DumpFormatError: If the station header line is missing.
    """
    text = Path(path).read_text(encoding='utf-8', errors='replace')
    return parse_airodump_text(text, registry)
