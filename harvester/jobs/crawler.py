"""Sequential crawl of one site: load, extract, paginate."""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from harvester.fetch.loader import LoadError, PageLoader
from harvester.jobs.metrics import Metrics
from harvester.parse.models import Record, SiteDescriptor
from harvester.sites import SiteStrategy, build_strategy

logger = logging.getLogger(__name__)


@dataclass
class CrawlSession:
    """Per-site crawl state, owned by a single ``SiteCrawler.run`` call."""

    queue: deque[str]
    records: list[Record] = field(default_factory=list)
    done: bool = False
    pages_scraped: int = 0

    @classmethod
    def start(cls, start_url: str) -> "CrawlSession":
        return cls(queue=deque([start_url]))

    def mark_done(self) -> None:
        # One-way: a finished crawl never resumes
        self.done = True


class SiteCrawler:
    """Walks a site's pages one at a time until done or out of pages."""

    def __init__(
        self,
        loader: PageLoader,
        strategy_factory: Callable[[SiteDescriptor], SiteStrategy] = build_strategy,
        timeout_budget: Optional[float] = None,
        metrics: Optional[Metrics] = None,
    ):
        self.loader = loader
        self.strategy_factory = strategy_factory
        self.timeout_budget = timeout_budget
        self.metrics = metrics

    async def run(self, site: SiteDescriptor) -> tuple[list[Record], Optional[Exception]]:
        """Crawl site; records gathered before a failure are always returned."""
        name = site.service_name
        strategy = self.strategy_factory(site)
        session = CrawlSession.start(site.start_url)

        while not session.done and session.queue:
            url = session.queue.popleft()
            try:
                page = await self.loader.acquire(url, name, self.timeout_budget)
            except LoadError as err:
                logger.error(f"[{name}] Giving up on {url}: {err}")
                return session.records, err
            except Exception as err:
                logger.error(f"[{name}] Unexpected error loading {url}: {err}", exc_info=True)
                return session.records, err

            try:
                page_records, page_done = strategy.extractor.extract_page(page)
                session.records.extend(page_records)
                session.pages_scraped += 1
                if self.metrics:
                    self.metrics.increment("pages")
                if page_done:
                    session.mark_done()

                if not session.done and session.pages_scraped == 1:
                    next_urls = strategy.paginator.get_next_page_urls(page)
                    if not next_urls:
                        logger.warning(
                            f"[{name}] There was only one page or the links to the next pages "
                            f"could not be read."
                        )
                    session.queue.extend(next_urls)
            except ValueError as err:
                logger.error(f"[{name}] Extraction failed on {url}: {err}")
                return session.records, err
            except Exception as err:
                logger.error(f"[{name}] Unexpected error on {url}: {err}", exc_info=True)
                return session.records, err
            finally:
                await page.close()

        if session.done and session.pages_scraped == 1:
            logger.debug(f"[{name}] Scraping ended on the first page.")
        logger.info(f"[{name}] Scraped pages count: {session.pages_scraped}.")
        return session.records, None
