"""
Unit tests for the airodump-ng CSV parser.
"""

import csv
import logging
from datetime import datetime, timezone

import pytest

from utils.wifi.constants import CLIENT_SECTION_MARKER, NOT_ASSOCIATED, normalize_mac
from utils.wifi.oui import OrganizationRegistry
from utils.wifi.parsers.airodump import (
    AirodumpCsvParser,
    DumpFormatError,
    parse_airodump_csv,
    parse_airodump_text,
    split_sections,
)

AP_HEADER = (
    'BSSID, First time seen, Last time seen, channel, Speed, Privacy, Cipher, '
    'Authentication, Power, # beacons, # IV, LAN IP, ID-length, ESSID, Key'
)

AP_ROWS = [
    '00:1A:2B:3C:4D:5E, 2024-01-01 09:58:00, 2024-01-01 10:05:00,  6,  54, WPA2, CCMP, PSK, -52,'
    '      120,        4,   0.  0.  0.  0,   7, HomeNet, ',
    'F0:9F:C2:11:22:33, 2024-01-01 09:59:10, 2024-01-01 10:04:30, 11, 130, WPA2 WPA, CCMP TKIP, MGT, -71,'
    '       88,        0,   0.  0.  0.  0,   0, , ',
]

CLIENT_ROWS = [
    'AA:BB:CC:DD:EE:FF, 2024-01-01 10:00:00, 2024-01-01 10:05:00, -40, 12, (not associated), ',
    '00:1A:2B:00:00:01, 2024-01-01 10:01:00, 2024-01-01 10:03:00, -61, 240, 00:1A:2B:3C:4D:5E, HomeNet,CoffeeShop',
    '02:00:00:00:00:01, 2024-01-01 10:02:00, 2024-01-01 10:02:30, -80, 3, (not associated), ',
]


def build_dump(ap_rows=None, client_rows=None, marker=True):
    """Build dump text the way airodump-ng lays it out."""
    ap_rows = AP_ROWS if ap_rows is None else ap_rows
    client_rows = CLIENT_ROWS if client_rows is None else client_rows
    lines = ['', AP_HEADER] + ap_rows + ['']
    if marker:
        lines.append(CLIENT_SECTION_MARKER)
    lines += client_rows + ['', '']
    return '\r\n'.join(lines)


def local(*args):
    return datetime(*args).astimezone()


@pytest.fixture
def registry():
    return OrganizationRegistry(
        oui={'00-1A-2B': 'Ayecom Technology Co., Ltd.'},
        cid={},
    )


@pytest.fixture
def parser(registry):
    return AirodumpCsvParser(registry)


class TestSplitSections:
    """Tests for splitting the dump on the station header."""

    def test_split(self):
        """Test AP rows land before the marker and client rows after it."""
        ap_section, client_section = split_sections(build_dump())

        assert 'HomeNet, ' in ap_section
        assert CLIENT_SECTION_MARKER not in ap_section
        assert CLIENT_SECTION_MARKER not in client_section
        assert 'AA:BB:CC:DD:EE:FF' in client_section

    def test_missing_marker(self):
        """Test a dump without the station header is a format error."""
        with pytest.raises(DumpFormatError):
            split_sections(build_dump(marker=False))

    def test_format_error_is_value_error(self):
        """Test callers catching ValueError also see format errors."""
        assert issubclass(DumpFormatError, ValueError)


class TestAccessPointParsing:
    """Tests for the access point table."""

    def test_counts(self, parser):
        """Test one record per AP row, header excluded."""
        access_points, _ = parser.parse(build_dump())
        assert len(access_points) == 2

    def test_field_mapping(self, parser):
        """Test columns map to the right fields."""
        access_points, _ = parser.parse(build_dump())
        ap = access_points[0]

        assert ap.bssid == '00-1a-2b-3c-4d-5e'
        assert ap.first_seen == local(2024, 1, 1, 9, 58, 0)
        assert ap.last_seen == local(2024, 1, 1, 10, 5, 0)
        assert ap.channel == 6
        assert ap.speed == '54'
        assert ap.privacy == 'WPA2'
        assert ap.authentication == 'PSK'
        assert ap.power == -52
        assert ap.essid == 'HomeNet'
        assert ap.is_hidden is False

    def test_hidden_network(self, parser):
        """Test an empty ESSID column is a hidden network."""
        access_points, _ = parser.parse(build_dump())
        ap = access_points[1]

        assert ap.essid == ''
        assert ap.is_hidden is True
        assert ap.privacy == 'WPA2 WPA'
        assert ap.authentication == 'MGT'

    def test_short_row_skipped(self, parser, caplog):
        """Test AP rows with fewer than 14 columns are skipped."""
        rows = AP_ROWS + ['11:22:33:44:55:66, 2024-01-01 10:00:00, 2024-01-01 10:01:00, 1']
        with caplog.at_level(logging.WARNING):
            access_points, _ = parser.parse(build_dump(ap_rows=rows))

        assert len(access_points) == 2
        assert 'Skipping AP row' in caplog.text

    def test_bad_channel_skipped(self, parser):
        """Test a non-numeric channel drops only that row."""
        bad = AP_ROWS[0].replace(',  6,', ', x,')
        access_points, clients = parser.parse(build_dump(ap_rows=[bad, AP_ROWS[1]]))

        assert [ap.bssid for ap in access_points] == ['f0-9f-c2-11-22-33']
        assert len(clients) == 3

    def test_bad_timestamp_skipped(self, parser):
        """Test an unparseable timestamp drops the row rather than zero-filling it."""
        bad = AP_ROWS[0].replace('2024-01-01 09:58:00', 'yesterday')
        access_points, _ = parser.parse(build_dump(ap_rows=[bad]))
        assert access_points == []

    def test_bad_bssid_skipped(self, parser):
        """Test an AP row whose BSSID is not six hex pairs is skipped."""
        bad = AP_ROWS[0].replace('00:1A:2B:3C:4D:5E', '00:1A:2B:3C:4D')
        access_points, _ = parser.parse(build_dump(ap_rows=[bad, AP_ROWS[1]]))
        assert [ap.bssid for ap in access_points] == ['f0-9f-c2-11-22-33']

    def test_empty_ap_table(self, parser):
        """Test a dump with only the AP header still parses."""
        access_points, clients = parser.parse(build_dump(ap_rows=[]))
        assert access_points == []
        assert len(clients) == 3


class TestClientParsing:
    """Tests for the station table."""

    def test_counts(self, parser):
        """Test one record per client row."""
        _, clients = parser.parse(build_dump())
        assert len(clients) == 3

    def test_unassociated_client(self, parser):
        """Test the sample unassociated station row."""
        _, clients = parser.parse(build_dump())
        client = clients[0]

        assert client.mac == 'aa-bb-cc-dd-ee-ff'
        assert client.first_seen == local(2024, 1, 1, 10, 0, 0)
        assert client.last_seen == local(2024, 1, 1, 10, 5, 0)
        assert client.power == -40
        assert client.packets == 12
        assert client.bssid == NOT_ASSOCIATED
        assert client.is_associated is False
        assert client.probes == ''

    def test_associated_client(self, parser):
        """Test BSSID normalization and probe joining."""
        _, clients = parser.parse(build_dump())
        client = clients[1]

        assert client.bssid == '00-1a-2b-3c-4d-5e'
        assert client.is_associated is True
        assert client.packets == 240
        assert client.probes == 'HomeNet,CoffeeShop'

    def test_address_normalization(self, parser):
        """Test colon addresses become lower-case hyphenated addresses."""
        rows = ['aa:bb:cc:dd:ee:ff, 2024-01-01 10:00:00, 2024-01-01 10:05:00, -40, 12, (not associated), ']
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert clients[0].mac == 'aa-bb-cc-dd-ee-ff'

    def test_short_row_skipped(self, parser, caplog):
        """Test a five-column row is skipped and the rest still parse."""
        rows = CLIENT_ROWS + ['11:22:33:44:55:66, 2024-01-01 10:00:00, 2024-01-01 10:05:00, -40, 12']
        with caplog.at_level(logging.WARNING):
            _, clients = parser.parse(build_dump(client_rows=rows))

        assert len(clients) == 3
        assert 'Skipping client row' in caplog.text

    def test_bad_power_skipped(self, parser):
        """Test non-numeric power drops the row."""
        rows = [CLIENT_ROWS[0].replace('-40', 'n/a'), CLIENT_ROWS[1]]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert [c.mac for c in clients] == ['00-1a-2b-00-00-01']

    def test_negative_packets_skipped(self, parser):
        """Test a negative packet count is rejected."""
        rows = [CLIENT_ROWS[0].replace(' 12,', ' -3,')]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert clients == []

    def test_unclassifiable_address_skipped(self, parser):
        """Test a row whose address prefix is not hex is skipped."""
        rows = ['ZZ:BB:CC:DD:EE:FF, 2024-01-01 10:00:00, 2024-01-01 10:05:00, -40, 12, (not associated), ',
                CLIENT_ROWS[1]]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert [c.mac for c in clients] == ['00-1a-2b-00-00-01']

    @pytest.mark.parametrize('mac', ['ab', '-1:BB:CC:DD:EE:FF', 'AA:BB:CC:DD:EE:FF:00', 'AABBCCDDEEFF'])
    def test_malformed_address_skipped(self, parser, mac):
        """Test short, signed or unseparated addresses drop only their row."""
        rows = [f'{mac}, 2024-01-01 10:00:00, 2024-01-01 10:05:00, -40, 12, (not associated), ',
                CLIENT_ROWS[1]]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert [c.mac for c in clients] == ['00-1a-2b-00-00-01']

    def test_malformed_bssid_skipped(self, parser):
        """Test an associated client with a broken BSSID is skipped."""
        rows = [CLIENT_ROWS[1].replace(', 00:1A:2B:3C:4D:5E,', ', 00:1A:2B,'), CLIENT_ROWS[0]]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert [c.mac for c in clients] == ['aa-bb-cc-dd-ee-ff']

    def test_duplicates_kept(self, parser):
        """Test repeated rows produce repeated records."""
        rows = [CLIENT_ROWS[0], CLIENT_ROWS[0]]
        _, clients = parser.parse(build_dump(client_rows=rows))
        assert len(clients) == 2


class TestUnreadableRows:
    """Tests for rows the CSV reader itself rejects."""

    @pytest.fixture
    def small_field_limit(self):
        previous = csv.field_size_limit(64)
        yield
        csv.field_size_limit(previous)

    def test_oversized_field_skipped(self, parser, small_field_limit, caplog):
        """Test an oversized field drops its row and the rest of the dump still parses."""
        oversized = CLIENT_ROWS[0].rstrip(', ') + ', ' + 'x' * 100
        rows = [CLIENT_ROWS[1], oversized, CLIENT_ROWS[2]]
        with caplog.at_level(logging.WARNING):
            access_points, clients = parser.parse(build_dump(client_rows=rows))

        assert len(access_points) == 2
        assert [c.mac for c in clients] == ['00-1a-2b-00-00-01', '02-00-00-00-00-01']
        assert 'Skipping unreadable row' in caplog.text

    def test_oversized_ap_field_skipped(self, parser, small_field_limit):
        """Test an oversized ESSID drops only that access point."""
        oversized = AP_ROWS[0].replace(' HomeNet,', ' ' + 'N' * 100 + ',')
        access_points, clients = parser.parse(build_dump(ap_rows=[oversized, AP_ROWS[1]]))

        assert [ap.bssid for ap in access_points] == ['f0-9f-c2-11-22-33']
        assert len(clients) == 3


class TestNormalizeMac:
    """Tests for canonical address normalization."""

    @pytest.mark.parametrize('mac,expected', [
        ('AA:BB:CC:DD:EE:FF', 'aa-bb-cc-dd-ee-ff'),
        ('aa-bb-cc-dd-ee-ff', 'aa-bb-cc-dd-ee-ff'),
        (' 00:1A:2B:3C:4D:5E ', '00-1a-2b-3c-4d-5e'),
    ])
    def test_valid(self, mac, expected):
        assert normalize_mac(mac) == expected

    @pytest.mark.parametrize('mac', ['', 'ab', '-1:BB:CC:DD:EE:FF', 'GG:BB:CC:DD:EE:FF', 'AA:BB:CC:DD:EE'])
    def test_invalid(self, mac):
        with pytest.raises(ValueError):
            normalize_mac(mac)


class TestClientEnrichment:
    """Tests for organization resolution during parsing."""

    def test_global_address_resolved(self, parser):
        """Test a globally assigned prefix found in the OUI table."""
        _, clients = parser.parse(build_dump())
        assert clients[1].organization == 'Ayecom Technology Co., Ltd.'

    def test_local_address_falls_back(self, parser):
        """Test locally administered addresses missing from CID become LOCAL."""
        _, clients = parser.parse(build_dump())
        # 0xAA and 0x02 both have the U/L bit set
        assert clients[0].organization == 'LOCAL'
        assert clients[2].organization == 'LOCAL'

    def test_local_address_resolved(self):
        """Test a CID hit wins over the LOCAL fallback."""
        parser = AirodumpCsvParser(OrganizationRegistry(cid={'AA-BB-CC': 'Example Corp'}))
        _, clients = parser.parse(build_dump())
        assert clients[0].organization == 'Example Corp'

    def test_global_miss_is_empty(self):
        """Test a globally assigned prefix missing from OUI is empty."""
        parser = AirodumpCsvParser(OrganizationRegistry())
        _, clients = parser.parse(build_dump())
        assert clients[1].organization == ''


class TestTimeZones:
    """Tests for timestamp interpretation."""

    def test_local_time_is_aware(self, parser):
        """Test parsed timestamps carry the local offset."""
        access_points, _ = parser.parse(build_dump())
        assert access_points[0].first_seen.tzinfo is not None

    def test_fixed_time_zone(self):
        """Test a parser configured with an explicit zone."""
        parser = AirodumpCsvParser(tz=timezone.utc)
        _, clients = parser.parse(build_dump())
        assert clients[0].last_seen == datetime(2024, 1, 1, 10, 5, 0, tzinfo=timezone.utc)


class TestModuleHelpers:
    """Tests for the text and file helpers."""

    def test_parse_text(self, registry):
        """Test the text helper matches the parser."""
        access_points, clients = parse_airodump_text(build_dump(), registry)
        assert len(access_points) == 2
        assert len(clients) == 3

    def test_parse_file(self, tmp_path, registry):
        """Test reading a dump from disk."""
        path = tmp_path / 'dump-01.csv'
        path.write_text(build_dump(), encoding='utf-8')

        access_points, clients = parse_airodump_csv(path, registry)
        assert len(access_points) == 2
        assert clients[1].organization == 'Ayecom Technology Co., Ltd.'

    def test_missing_file(self, tmp_path):
        """Test a missing dump raises OSError."""
        with pytest.raises(OSError):
            parse_airodump_csv(tmp_path / 'missing.csv')

    def test_missing_marker_produces_nothing(self):
        """Test a dump without the station header raises before producing records."""
        with pytest.raises(DumpFormatError):
            parse_airodump_text(build_dump(marker=False))
