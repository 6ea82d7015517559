"""Derive the URLs of the pages after the first one."""
import logging
from abc import ABC, abstractmethod
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

logger = logging.getLogger(__name__)


class PaginationEngine(ABC):
    """Lists the remaining pages of a site from its first page.

    An empty list means a single-page site, or a link structure that was not
    recognized.
    """

    @abstractmethod
    def get_next_page_urls(self, page) -> list[str]:
        ...


def with_query_param(url: str, name: str, value) -> str:
    """Set (or replace) one query parameter, keeping the others in order."""
    parsed = urlparse(url)
    params = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != name]
    params.append((name, str(value)))
    return urlunparse(parsed._replace(query=urlencode(params)))


class PagerLinkPagination(PaginationEngine):
    """Counts pager links on the first page and numbers pages with ``page=N``.

    The site appends ``&page=N`` to the listing URL, so links are counted
    rather than read. The first counted link is not a page of its own, so
    ``count`` links yield pages 2..count-1.
    """

    def __init__(
        self,
        base_url: str,
        pager_selector: str = "div.pager.rel.clr",
        link_selector: str = "a.block.br3.brc8.large.tdnone.lheight24",
        service_name: str = "",
    ):
        self.base_url = base_url
        self.pager_selector = pager_selector
        self.link_selector = link_selector
        self.service_name = service_name

    def count_page_links(self, document) -> int:
        return len(document.css(f"{self.pager_selector} {self.link_selector}"))

    def get_next_page_urls(self, page) -> list[str]:
        pages_count = self.count_page_links(page.document)
        separator = "&" if "?" in self.base_url else "?"
        urls = [f"{self.base_url}{separator}page={i}" for i in range(2, pages_count)]
        logger.debug(f"[{self.service_name}] pages number: {len(urls)} + 1 (first page)")
        return urls


class OffsetPagination(PaginationEngine):
    """Steps an ``offset`` query parameter from the first page's URL."""

    def __init__(self, page_size: int, max_pages: int, service_name: str = ""):
        self.page_size = page_size
        self.max_pages = max_pages
        self.service_name = service_name

    def get_next_page_urls(self, page) -> list[str]:
        url = page.url
        query = dict(parse_qsl(urlparse(url).query))
        try:
            offset = int(query.get("offset", 0))
        except ValueError:
            logger.warning(f"[{self.service_name}] Unreadable offset in {url}, no further pages")
            return []

        return [
            with_query_param(url, "offset", offset + self.page_size * i)
            for i in range(1, self.max_pages)
        ]
