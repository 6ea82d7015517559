"""Listing date labels: parsing and the 24h recency cutoff.

Listing sites print dates in a handful of shapes:

- ``"dzisiaj 14:05"`` / ``"wczoraj 09:00"``: a day word plus a clock time
- ``"29 gru"``: a day of month plus a month prefix, with no year and no time
- anything else, which is kept verbatim as a ``RawDate``
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from harvester.parse.models import ParsedDate, RawDate

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)
# Absorbs run-time jitter and entries posted right around midnight
CUTOFF_GRACE = timedelta(seconds=30)
DECEMBER = 12


class UnrecognizedMonthError(ValueError):
    """Month prefix not in the locale's vocabulary."""


@dataclass(frozen=True)
class DateLocale:
    """Vocabulary used by a site to print relative dates."""

    today: str
    yesterday: str
    months: dict[str, int] = field(default_factory=dict)


POLISH = DateLocale(
    today="dzisiaj",
    yesterday="wczoraj",
    months={
        "sty": 1,
        "lut": 2,
        "mar": 3,
        "kwi": 4,
        "maj": 5,
        "cze": 6,
        "lip": 7,
        "sie": 8,
        "wrz": 9,
        "paź": 10,
        "paz": 10,
        "lis": 11,
        "gru": 12,
    },
)

ENGLISH = DateLocale(
    today="today",
    yesterday="yesterday",
    months={
        "jan": 1,
        "feb": 2,
        "mar": 3,
        "apr": 4,
        "may": 5,
        "jun": 6,
        "jul": 7,
        "aug": 8,
        "sep": 9,
        "oct": 10,
        "nov": 11,
        "dec": 12,
    },
)


_DIGITS = re.compile(r"\d+", re.ASCII)


def _parse_int(text: str) -> int | None:
    # Plain ASCII digits only; int() would also take "+5", "1_0" and non-Latin digits
    if not _DIGITS.fullmatch(text):
        return None
    return int(text)


class DateNormalizer:
    """Turns listing date labels into comparable timestamps."""

    def __init__(self, locale: DateLocale = POLISH):
        self.locale = locale

    def normalize(self, raw: str, now: datetime) -> ParsedDate | RawDate:
        """Parse a date label; unparseable labels come back as ``RawDate``."""
        tokens = raw.split()
        if len(tokens) != 2:
            logger.debug(f"Keeping raw date label: {raw!r}")
            return RawDate(text=raw)

        first, second = tokens
        if first in (self.locale.today, self.locale.yesterday):
            return self._parse_day_word(raw, first, second, now)
        return self._parse_month_prefix(raw, first, second, now)

    def _parse_day_word(self, raw: str, word: str, clock: str, now: datetime) -> ParsedDate | RawDate:
        parts = clock.split(":")
        if len(parts) != 2:
            return RawDate(text=raw)
        hour, minute = _parse_int(parts[0]), _parse_int(parts[1])
        if hour is None or minute is None:
            logger.debug(f"Keeping raw date label: {raw!r}")
            return RawDate(text=raw)

        day = now.date()
        if word == self.locale.yesterday:
            day -= DAY
        try:
            value = datetime(day.year, day.month, day.day, hour, minute)
        except ValueError:
            logger.debug(f"Clock time out of range: {raw!r}")
            return RawDate(text=raw)
        return ParsedDate(value=value, same_day_token=True)

    def _parse_month_prefix(self, raw: str, day_text: str, month_text: str, now: datetime) -> ParsedDate | RawDate:
        day = _parse_int(day_text)
        if day is None:
            logger.debug(f"Keeping raw date label: {raw!r}")
            return RawDate(text=raw)

        month = self.month_number(month_text)
        year = now.year
        # Last December's entries are still listed in early January, without a year
        if month == DECEMBER and day > now.day:
            year -= 1
        try:
            value = datetime(year, month, day)
        except ValueError:
            logger.debug(f"Day out of range for month: {raw!r}")
            return RawDate(text=raw)
        return ParsedDate(value=value, same_day_token=False)

    def month_number(self, month_text: str) -> int:
        """Map a month abbreviation (first three letters) to 1..12."""
        prefix = month_text[:3].lower()
        try:
            return self.locale.months[prefix]
        except KeyError:
            raise UnrecognizedMonthError(f"Unrecognized month prefix: {month_text!r}") from None

    @staticmethod
    def is_stale(timestamp: datetime, same_day_token: bool, now: datetime) -> bool:
        """True when an entry is older than the cutoff window.

        Month-prefix dates carry no clock time, so they are compared one day
        earlier than dates with a clock time.
        """
        cutoff = now - (DAY + CUTOFF_GRACE)
        return cutoff > timestamp - (timedelta(0) if same_day_token else DAY)
