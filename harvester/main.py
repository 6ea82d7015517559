"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys

from harvester.config import DATA_DIR, Config, config
from harvester.fetch.browser import BrowserSession
from harvester.fetch.loader import PageLoader
from harvester.jobs.crawler import SiteCrawler
from harvester.jobs.metrics import Metrics
from harvester.jobs.runner import ScrapeRunner
from harvester.logging_conf import setup_logging
from harvester.sites import SiteName, load_sites
from harvester.store.snapshot import SnapshotWriter

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Listing Harvester")

    parser.add_argument(
        "--site",
        action="append",
        choices=[name.value for name in SiteName],
        default=None,
        help="Site to scrape (repeatable, default: all sites)",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (pretty snapshots, record validation, verbose logs)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help=f"Per-page load budget in seconds (default: {config.SCRAPE_SITE_TIMEOUT})",
    )
    parser.add_argument(
        "--fan-out",
        type=int,
        default=None,
        help=f"Sites crawled at the same time (default: {config.FAN_OUT})",
    )

    return parser.parse_args(argv)


async def run(sites, dev_mode: bool) -> None:
    """Open a browser session and crawl sites."""
    metrics = Metrics(len(sites))
    async with BrowserSession() as session:
        loader = PageLoader(session, timeout_budget=config.SCRAPE_SITE_TIMEOUT)
        crawler = SiteCrawler(loader, metrics=metrics)
        runner = ScrapeRunner(
            crawler,
            SnapshotWriter(DATA_DIR, pretty=dev_mode),
            dev_mode=dev_mode,
            fan_out=config.FAN_OUT,
            metrics=metrics,
        )
        await runner.run(sites)


def main() -> None:
    """Main entry point."""
    setup_logging()
    args = parse_args()

    is_dev = args.dev or config.IS_DEV
    if is_dev:
        logging.getLogger().setLevel(logging.DEBUG)

    # Override config from args
    if args.timeout is not None:
        Config.SCRAPE_SITE_TIMEOUT = args.timeout
    if args.fan_out is not None:
        Config.FAN_OUT = args.fan_out

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    sites = load_sites(args.site)

    logger.info("=" * 60)
    logger.info("Listing Harvester Starting")
    logger.info(f"Mode: {'DEV' if is_dev else 'PROD'}")
    logger.info(f"Sites: {', '.join(site.service_name for site in sites)}")
    logger.info(f"Fan-out: {config.FAN_OUT}")
    logger.info(f"Page load budget: {config.SCRAPE_SITE_TIMEOUT}s")
    logger.info("=" * 60)

    try:
        asyncio.run(run(sites, is_dev))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
