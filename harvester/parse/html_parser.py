"""Parse listing HTML and normalize visible text fields."""
import logging
import re

from selectolax.parser import HTMLParser, Node

logger = logging.getLogger(__name__)

PRICE_JUNK = re.compile(r"[^\d.,]")


def parse_content(raw_content: str) -> HTMLParser:
    """Parse page content into a queryable document."""
    return HTMLParser(raw_content or "")


def node_text(node: Node | None, selector: str, default: str = "") -> str:
    """Stripped text of the first element matching selector under node."""
    if node is None:
        return default
    found = node.css_first(selector)
    return found.text(strip=True) if found else default


def node_attr(node: Node | None, selector: str, attr: str, default: str = "") -> str:
    """Attribute of the first element matching selector under node."""
    if node is None:
        return default
    found = node.css_first(selector)
    if found is None:
        return default
    return found.attributes.get(attr) or default


def clean_title(text: str) -> str:
    """Drop line breaks and surrounding whitespace from a title."""
    return text.replace("\n", "").strip()


def normalize_price(text: str) -> float | str:
    """Keep digits, dots and commas; commas become dots.

    Returns a float when the result is a number, otherwise the stripped text
    so the record is kept and can be flagged later.
    """
    cleaned = PRICE_JUNK.sub("", text or "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        logger.debug(f"Price {cleaned!r} is not a number")
        return cleaned
