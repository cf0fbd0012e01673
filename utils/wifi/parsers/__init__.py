"""Parsers for WiFi capture tool output."""

from .airodump import (
    AirodumpCsvParser,
    DumpFormatError,
    parse_airodump_csv,
    parse_airodump_text,
    split_sections,
)

__all__ = [
    'AirodumpCsvParser',
    'DumpFormatError',
    'parse_airodump_csv',
    'parse_airodump_text',
    'split_sections',
]
