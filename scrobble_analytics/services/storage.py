"""File storage for the scrobble log and the analytics snapshot"""
import logging
from pathlib import Path
from typing import List, Sequence, Union

from pydantic import ValidationError

from scrobble_analytics.errors import StoreCorruptionError
from scrobble_analytics.models.analytics import AnalyticsSnapshot
from scrobble_analytics.models.scrobble import ScrobbleRecord
from scrobble_analytics.utils.json_encoder import json_pretty, ndjson_line

logger = logging.getLogger(__name__)

def ensure_dir(path: Union[str, Path]) -> Path:
    """Create a directory and its parents if missing"""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path

class LogStore:
    """Append-only NDJSON log of scrobble records"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_all(self) -> List[ScrobbleRecord]:
        """
        Read every record in the log.

        Returns:
            Records in log order; empty if the log does not exist yet

        Raises:
            StoreCorruptionError: If a non-blank line is not a valid record
        """
        ensure_dir(self.path.parent)
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info(f"No scrobble log at {self.path} yet")
            return []

        records = []
        # Split on b"\n" only: U+2028 and similar may appear unescaped inside values.
        # Lines are decoded one by one so bad bytes are reported with their line.
        for line_number, line in enumerate(raw.split(b'\n'), start=1):
            if not line.strip():
                continue
            try:
                # Strict: the log only ever holds what append() wrote, no coercion
                records.append(ScrobbleRecord.model_validate_json(line.decode('utf-8'), strict=True))
            except UnicodeDecodeError as e:
                logger.error(f"Corrupt scrobble log {self.path} at line {line_number}")
                raise StoreCorruptionError(self.path, line_number, f"invalid UTF-8: {e.reason}") from e
            except ValidationError as e:
                logger.error(f"Corrupt scrobble log {self.path} at line {line_number}")
                raise StoreCorruptionError(self.path, line_number, _first_error(e)) from e

        logger.info(f"Read {len(records)} records from {self.path}")
        return records

    def append(self, records: Sequence[ScrobbleRecord]) -> None:
        """Append records to the end of the log, creating it if absent"""
        ensure_dir(self.path.parent)
        if not records:
            return

        payload = ''.join(ndjson_line(record) for record in records)
        with open(self.path, 'a', encoding='utf-8', newline='\n') as f:
            f.write(payload)
        logger.info(f"Appended {len(records)} records to {self.path}")

def write_snapshot(path: Union[str, Path], snapshot: AnalyticsSnapshot) -> Path:
    """Write the snapshot as pretty-printed JSON, replacing any previous file"""
    path = Path(path)
    ensure_dir(path.parent)
    path.write_text(json_pretty(snapshot), encoding='utf-8')
    logger.info(f"Wrote analytics snapshot to {path}")
    return path

def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = '.'.join(str(part) for part in first.get('loc', ()))
    return f"{location}: {first['msg']}" if location else first['msg']
