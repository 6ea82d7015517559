"""Site registry: descriptors and per-site extraction/pagination strategies."""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable

from harvester.config import config
from harvester.parse.dates import POLISH, DateNormalizer
from harvester.parse.extractors.base import RecordExtractor
from harvester.parse.extractors.listing_html import OfferTableExtractor
from harvester.parse.extractors.listing_json import PayloadListingExtractor
from harvester.parse.models import ContentShape, SiteDescriptor
from harvester.parse.pagination import OffsetPagination, PagerLinkPagination, PaginationEngine

logger = logging.getLogger(__name__)


class SiteName(str, Enum):
    OLX = "olx"
    OTODOM = "otodom"


SITE_SHAPES: dict[SiteName, ContentShape] = {
    SiteName.OLX: ContentShape.CONTENT,
    SiteName.OTODOM: ContentShape.HANDLE,
}


@dataclass(frozen=True)
class SiteStrategy:
    """Extraction and pagination for one site, fixed for a whole crawl."""

    extractor: RecordExtractor
    paginator: PaginationEngine


def get_site(name: str | SiteName, site_urls: dict[str, str] | None = None) -> SiteDescriptor:
    """Build the descriptor of a configured site."""
    site_name = SiteName(name)
    urls = site_urls if site_urls is not None else config.site_urls()
    return SiteDescriptor(
        service_name=site_name.value,
        start_url=urls[site_name.value],
        content_shape=SITE_SHAPES[site_name],
    )


def load_sites(names: Iterable[str] | None = None) -> list[SiteDescriptor]:
    """Descriptors for names, or for every known site, in a stable order."""
    if names is None:
        names = [name.value for name in SiteName]
    return [get_site(name) for name in names]


def build_strategy(
    site: SiteDescriptor,
    clock: Callable[[], datetime] = datetime.now,
) -> SiteStrategy:
    """Pick the extractor/paginator pair for site."""
    normalizer = DateNormalizer(POLISH)
    name = site.service_name

    if site.content_shape == ContentShape.CONTENT:
        return SiteStrategy(
            extractor=OfferTableExtractor(normalizer, name, clock=clock),
            paginator=PagerLinkPagination(site.start_url, service_name=name),
        )
    if site.content_shape == ContentShape.HANDLE:
        return SiteStrategy(
            extractor=PayloadListingExtractor(normalizer, name, clock=clock),
            paginator=OffsetPagination(
                page_size=config.OTODOM_PAGE_SIZE,
                max_pages=config.OTODOM_MAX_PAGES,
                service_name=name,
            ),
        )
    raise ValueError(f"Unsupported content shape: {site.content_shape}")
