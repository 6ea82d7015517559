"""Run counters for the final report."""
import time
import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """Track sites, pages and records of one run."""

    def __init__(self, total_sites: int):
        self.total_sites = total_sites
        self.start_time = time.time()
        self.counters: Dict[str, int] = defaultdict(int)
        self.records_per_site: Dict[str, int] = {}

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] += amount

    def record_site(self, service_name: str, records: int, ok: bool) -> None:
        """Record the outcome of one site crawl."""
        self.records_per_site[service_name] = records
        self.increment("records", records)
        self.increment("sites_ok" if ok else "sites_failed")

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        return {
            "total_sites": self.total_sites,
            "sites_ok": self.counters.get("sites_ok", 0),
            "sites_failed": self.counters.get("sites_failed", 0),
            "pages": self.counters.get("pages", 0),
            "records": self.counters.get("records", 0),
            "elapsed_seconds": round(time.time() - self.start_time, 2),
        }

    def report(self) -> None:
        """Log the final report."""
        summary = self.get_summary()
        logger.info("=" * 60)
        logger.info("FINAL REPORT")
        logger.info(f"Elapsed: {summary['elapsed_seconds']:.2f}s")
        logger.info(f"Sites OK: {summary['sites_ok']}/{summary['total_sites']}")
        logger.info(f"Sites failed: {summary['sites_failed']}")
        logger.info(f"Pages scraped: {summary['pages']}")
        logger.info(f"Records: {summary['records']}")
        for name, count in self.records_per_site.items():
            logger.info(f"  {name}: {count}")
        logger.info("=" * 60)
