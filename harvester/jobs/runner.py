"""Main job runner orchestrating the site crawls."""
import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from harvester.config import config
from harvester.jobs.crawler import SiteCrawler
from harvester.jobs.metrics import Metrics
from harvester.parse.models import SiteDescriptor
from harvester.parse.validate import validate_records
from harvester.store.snapshot import SnapshotWriter

logger = logging.getLogger(__name__)


class ScrapeRunner:
    """Crawls the site list a few sites at a time and saves one snapshot per site."""

    def __init__(
        self,
        crawler: SiteCrawler,
        writer: SnapshotWriter,
        dev_mode: bool = False,
        fan_out: int = config.FAN_OUT,
        metrics: Optional[Metrics] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.crawler = crawler
        self.writer = writer
        self.dev_mode = dev_mode
        self.fan_out = fan_out
        self.metrics = metrics
        self.clock = clock

    async def run(self, sites: list[SiteDescriptor]) -> None:
        """Run every site; a failing site never stops the others."""
        if self.metrics is None:
            self.metrics = Metrics(len(sites))
        run_date = self.clock()
        logger.info(f"Starting run of {len(sites)} sites, {self.fan_out} at a time")

        # Each group finishes before the next one starts
        for i in range(0, len(sites), self.fan_out):
            group = sites[i : i + self.fan_out]
            results = await asyncio.gather(
                *(self._scrape_site(site, run_date) for site in group),
                return_exceptions=True,
            )
            for site, result in zip(group, results):
                if isinstance(result, BaseException):
                    logger.error(
                        f"[{site.service_name}] Site run failed: {result!r}",
                        exc_info=result,
                    )
                    self.metrics.record_site(site.service_name, 0, ok=False)

        self.metrics.report()

    async def _scrape_site(self, site: SiteDescriptor, run_date: datetime) -> None:
        name = site.service_name
        logger.info(f"[{name}] Scraping {site.start_url}")
        records, error = await self.crawler.run(site)
        if error is not None:
            logger.error(
                f"[{name}] Crawl stopped early, keeping {len(records)} records: {error}"
            )

        # Partial results are saved too
        await self.writer.save(name, run_date, records)
        if self.dev_mode:
            validate_records(records, name)

        logger.info(f"[{name}] The number of today's announcements is: {len(records)}")
        self.metrics.record_site(name, len(records), ok=error is None)
