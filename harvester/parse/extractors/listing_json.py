"""Listing entries read from the page's structured payload."""
import logging
from typing import Any

from harvester.parse.extractors.base import RecordExtractor

logger = logging.getLogger(__name__)


def _price_text(price: Any) -> str:
    if isinstance(price, dict):
        return str(price.get("label") or price.get("value") or "")
    if price is None:
        return ""
    return str(price)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class PayloadListingExtractor(RecordExtractor):
    """Reads ``items`` from a JSON listing response."""

    def iter_entries(self, page) -> list[dict]:
        payload = page.json()
        items = payload.get("items", []) if isinstance(payload, dict) else []
        if not isinstance(items, list):
            logger.warning(f"[{self.service_name}] Payload items of {page.url} is not a list")
            return []
        if not items:
            logger.warning(f"[{self.service_name}] No items in payload of {page.url}")

        entries = [item for item in items if isinstance(item, dict)]
        if len(entries) != len(items):
            logger.warning(
                f"[{self.service_name}] Skipped {len(items) - len(entries)} malformed items on {page.url}"
            )
        return entries

    def read_date_text(self, entry: dict) -> str:
        return _text(entry.get("date_label"))

    def read_fields(self, entry: dict) -> dict[str, str]:
        return {
            "id": _text(entry.get("id")),
            "title": _text(entry.get("title")).strip(),
            "url": _text(entry.get("url")),
            "price": _price_text(entry.get("price")),
            "img_url": _text(entry.get("photo")),
            "description": _text(entry.get("description")).strip(),
        }
