"""Shared record extraction loop with the recency cutoff."""
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Iterable

from harvester.parse.dates import DateNormalizer
from harvester.parse.html_parser import normalize_price
from harvester.parse.models import DebugInfo, ParsedDate, RawDate, Record

logger = logging.getLogger(__name__)


class RecordExtractor(ABC):
    """Turns one loaded page into records plus a "done" flag.

    Entries are read in page order, newest first. The first entry older than
    the cutoff window ends the page and the whole site crawl; entries whose
    date could not be parsed are kept and never trigger the cutoff.
    """

    def __init__(
        self,
        normalizer: DateNormalizer,
        service_name: str,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.normalizer = normalizer
        self.service_name = service_name
        self.clock = clock

    @abstractmethod
    def iter_entries(self, page) -> Iterable[Any]:
        """Listing entries of the page, in document order."""

    @abstractmethod
    def read_date_text(self, entry) -> str:
        ...

    @abstractmethod
    def read_fields(self, entry) -> dict[str, str]:
        """Visible fields: id, title, url, price (text), img_url, description."""

    def extract_page(self, page) -> tuple[list[Record], bool]:
        started = time.perf_counter()
        now = self.clock()
        records: list[Record] = []
        done = False

        for idx, entry in enumerate(self.iter_entries(page)):
            date = self.normalizer.normalize(self.read_date_text(entry), now)
            if self._is_past_cutoff(date, now):
                done = True
                break

            fields = self.read_fields(entry)
            records.append(
                Record(
                    id=fields.get("id", ""),
                    title=fields.get("title", ""),
                    price=normalize_price(fields.get("price", "")),
                    url=fields.get("url", ""),
                    date=date,
                    img_url=fields.get("img_url", ""),
                    description=fields.get("description", ""),
                    debug_info=DebugInfo(url=page.url, idx=idx),
                )
            )

        logger.debug(
            f"[{self.service_name}] page parsed in {(time.perf_counter() - started) * 1000:.0f}ms: "
            f"{len(records)} records, done={done}"
        )
        return records, done

    def _is_past_cutoff(self, date: ParsedDate | RawDate, now: datetime) -> bool:
        if isinstance(date, RawDate):
            return False
        if isinstance(date, ParsedDate):
            return self.normalizer.is_stale(date.value, date.same_day_token, now)
        raise TypeError(f"Unsupported listing date: {date!r}")
