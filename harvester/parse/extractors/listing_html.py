"""Listing entries read from page markup (OLX offers table)."""
from selectolax.parser import Node

from harvester.parse.extractors.base import RecordExtractor
from harvester.parse.html_parser import clean_title, node_attr, node_text

OFFERS_SELECTOR = "table#offers_table div.offer-wrapper > table"
CLOCK_ICON_SELECTOR = '.bottom-cell .breadcrumb.x-normal > span > [data-icon*="clock"]'


class OfferTableExtractor(RecordExtractor):
    """Reads offers from the ``#offers_table`` listing layout."""

    def iter_entries(self, page) -> list[Node]:
        return page.document.css(OFFERS_SELECTOR)

    def read_date_text(self, entry: Node) -> str:
        # The date is the text of the span holding the clock icon
        icon = entry.css_first(CLOCK_ICON_SELECTOR)
        if icon is None or icon.parent is None:
            return ""
        return icon.parent.text()

    def read_fields(self, entry: Node) -> dict[str, str]:
        title_link = entry.css_first(".title-cell a")
        return {
            "id": entry.attributes.get("data-id") or "",
            "title": clean_title(title_link.text()) if title_link else "",
            "url": (title_link.attributes.get("href") or "") if title_link else "",
            "price": node_text(entry, ".td-price .price > strong"),
            "img_url": node_attr(entry, ".photo-cell > a > img", "src"),
            # The offer card has no description; it lives on the detail page
            "description": "",
        }
