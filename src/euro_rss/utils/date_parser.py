"""Utility for parsing the date text found on institutional websites."""

import datetime
import re
from datetime import timezone
from typing import Optional, Protocol

from dateutil import parser

from euro_rss.models import DateFormat


class DateParserProtocol(Protocol):
    """Protocol defining the interface for date parsing."""

    def parse_date(self, date_str: Optional[str]) -> Optional[datetime.datetime]:
        """Parse a date string into a timezone-aware datetime object (UTC).

        Args:
            date_str: The date string to parse.

        Returns:
            A timezone-aware datetime object (UTC) or None if parsing fails.
        """
        ...


class FormatDateParser(DateParserProtocol):
    """Parses date text written in one known format.

    Sites declare the format they publish dates in, so no guessing across
    formats is attempted. The date may be embedded in surrounding text
    ("Published 25.12.2024"); the first occurrence is used.
    """

    _patterns = {
        DateFormat.DOTTED: re.compile(r"(?<!\d)(\d{1,2})\.(\d{1,2})\.(\d{4})(?!\d)"),
        DateFormat.SLASHED: re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)"),
        # "5 December 2024", "5 Dec. 2024", "05 Dec, 2024"
        DateFormat.DAY_MONTH_YEAR: re.compile(r"(?<!\d)(\d{1,2})\s+([A-Za-z]{3,9})\.?,?\s+(\d{4})(?!\d)"),
        DateFormat.ISO: re.compile(
            r"\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}(?::?\d{2})?)?)?"
        ),
    }

    _month_names = parser.parserinfo()

    def __init__(self, date_format: DateFormat):
        self.date_format = DateFormat(date_format)

    def parse_date(self, date_str: Optional[str]) -> Optional[datetime.datetime]:
        """Parse date text in the configured format into a UTC datetime."""
        if not date_str:
            return None

        match = self._patterns[self.date_format].search(date_str)
        if match is None:
            return None

        try:
            parsed_date = self._build(match)
        except (ValueError, OverflowError):
            # Out of range values such as 31.02.2024
            return None
        if parsed_date is None:
            return None

        # If parsed date is naive, assume UTC
        if parsed_date.tzinfo is None:
            parsed_date = parsed_date.replace(tzinfo=timezone.utc)
        return parsed_date.astimezone(timezone.utc)

    def _build(self, match: re.Match) -> Optional[datetime.datetime]:
        if self.date_format == DateFormat.ISO:
            return parser.isoparse(match.group(0).replace(" ", "T"))

        if self.date_format == DateFormat.DAY_MONTH_YEAR:
            day, month_name, year = match.groups()
            month = self._month_names.month(month_name)
            if month is None:
                return None
            return datetime.datetime(int(year), month, int(day))

        day, month, year = match.groups()
        return datetime.datetime(int(year), int(month), int(day))
