"""Development check for records with missing fields."""
import logging

from harvester.parse.models import RawDate, Record

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "title", "price", "url", "date", "img_url")


def missing_fields(record: Record) -> list[str]:
    """Names of required fields that are empty on record."""
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(record, name)
        if isinstance(value, RawDate):
            value = value.text
        if value == "":
            missing.append(name)
    return missing


def validate_records(records: list[Record], service_name: str) -> list[Record]:
    """Log one warning listing the records with missing data.

    Purely observational: returns the records that were flagged.
    """
    flagged = [r for r in records if missing_fields(r)]
    if flagged:
        details = [
            {"idx": r.debug_info.idx, "url": r.debug_info.url, "missing": missing_fields(r)}
            for r in flagged
        ]
        logger.warning(f"[{service_name}] Some of the ads have missing data: {details}")
    return flagged
