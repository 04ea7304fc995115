"""File-based record storage adapter."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from bizdash.core.records import COLLECTIONS, Record, record_from_api
from bizdash.ports.record_store import RecordStoreError

logger = logging.getLogger(__name__)


class JsonRecordStore:
    """
    File-based record storage.

    Implements RecordStore protocol. Each collection is a JSON array of raw
    backend rows in `<collection>.json`, so backups can be read back as-is.
    """

    def __init__(self, data_dir: Path | str, tz: ZoneInfo | None = None):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.tz = tz

    def _path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise RecordStoreError(f"Unknown collection: {collection}")
        return self.data_dir / f"{collection}.json"

    def read_rows(self, collection: str) -> list[dict]:
        """Raw rows of a collection; a missing file is an empty collection."""
        path = self._path(collection)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise RecordStoreError(f"Corrupt {path.name}: {e}") from e
        if not isinstance(data, list):
            raise RecordStoreError(f"Corrupt {path.name}: expected a list of rows")
        return data

    def fetch_raw(self, collection: str) -> list[dict]:
        """Raw rows, for backups."""
        return self.read_rows(collection)

    def write_rows(self, collection: str, rows: list[dict]) -> Path:
        """Overwrite a collection with raw rows."""
        path = self._path(collection)
        path.write_text(json.dumps(rows, indent=2, default=str))
        return path

    def fetch(self, collection: str) -> list[Record]:
        """All records, newest first."""
        rows = self.read_rows(collection)
        records = [record_from_api(collection, row, self.tz) for row in rows]
        epoch = datetime.min.replace(tzinfo=timezone.utc)

        def sort_key(record: Record) -> datetime:
            created = record.created_at
            if created is None:
                return epoch
            return created if created.tzinfo else created.replace(tzinfo=timezone.utc)

        return sorted(records, key=sort_key, reverse=True)

    def create(self, collection: str, record: Record) -> Record:
        rows = self.read_rows(collection)
        now = datetime.now(timezone.utc).isoformat()
        row = record.to_api()
        row["id"] = record.id or str(uuid.uuid4())
        row["created_at"] = now
        row["updated_at"] = now
        rows.append(row)
        self.write_rows(collection, rows)
        logger.debug(f"Created {collection}/{row['id']}")
        return record_from_api(collection, row, self.tz)

    def update(self, collection: str, record_id: str, changes: dict) -> Record:
        rows = self.read_rows(collection)
        for row in rows:
            if str(row.get("id")) == record_id:
                row.update(changes)
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                self.write_rows(collection, rows)
                return record_from_api(collection, row, self.tz)
        raise RecordStoreError(f"No {collection} record with id {record_id}")

    def delete(self, collection: str, record_id: str) -> None:
        rows = self.read_rows(collection)
        remaining = [row for row in rows if str(row.get("id")) != record_id]
        if len(remaining) == len(rows):
            raise RecordStoreError(f"No {collection} record with id {record_id}")
        self.write_rows(collection, remaining)

