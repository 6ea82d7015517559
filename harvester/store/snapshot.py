"""Per-site dated snapshot files: data/<site>/<run date>.json."""
import json
import logging
from datetime import datetime
from pathlib import Path

import aiofiles
import orjson

from harvester.config import DATA_DIR
from harvester.parse.models import Record

logger = logging.getLogger(__name__)

FILE_DATE_FORMAT = "%Y-%m-%d_%H-%M-%S"


class PersistenceError(Exception):
    """A snapshot could not be written."""


def format_date_to_file_name(run_date: datetime) -> str:
    return run_date.strftime(FILE_DATE_FORMAT)


class SnapshotWriter:
    """Writes one JSON snapshot per site and run."""

    def __init__(self, data_dir: Path = DATA_DIR, pretty: bool = False):
        self.data_dir = data_dir
        self.pretty = pretty

    def snapshot_path(self, service_name: str, run_date: datetime) -> Path:
        return self.data_dir / service_name / f"{format_date_to_file_name(run_date)}.json"

    def dumps(self, run_date: datetime, records: list[Record]) -> bytes:
        snapshot = {
            "date": run_date.isoformat(),
            "offers": [record.model_dump(mode="json") for record in records],
        }
        if self.pretty:
            return json.dumps(snapshot, indent="\t", ensure_ascii=False).encode("utf-8")
        return orjson.dumps(snapshot)

    async def save(self, service_name: str, run_date: datetime, records: list[Record]) -> Path:
        """Write the snapshot and return its path."""
        path = self.snapshot_path(service_name, run_date)
        payload = self.dumps(run_date, records)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"About to save the {service_name} announcements to {path}")
            async with aiofiles.open(path, "wb") as f:
                await f.write(payload)
        except OSError as err:
            logger.error(f"Fail to save the {service_name} announcements to {path}: {err}")
            raise PersistenceError(f"Could not write {path}") from err
        return path
