"""Ingestion and build orchestration for the scrobble log"""
import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from scrobble_analytics.analytics import AnalyticsAggregator
from scrobble_analytics.config import Settings
from scrobble_analytics.errors import InputFormatError, UsageError
from scrobble_analytics.models.results import BuildResult, IngestResult
from scrobble_analytics.normalizer import normalize_scrobble
from scrobble_analytics.services.lastfm import LastFMAPI
from scrobble_analytics.services.storage import LogStore, ensure_dir, write_snapshot

logger = logging.getLogger(__name__)

def _reject_constant(name: str):
    """NaN and Infinity are not JSON; json.loads would otherwise accept them"""
    raise ValueError(f"Invalid JSON token {name}")

class ScrobblePipeline:
    """Runs ingestion into the scrobble log and builds the analytics snapshot from it"""

    def __init__(self, settings: Settings):
        """Initialize pipeline with settings"""
        self.settings = settings
        self.store = LogStore(settings.scrobbles_path)
        self.aggregator = AnalyticsAggregator(top_limit=settings.TOP_LIMIT)

    def ingest(self, input_path: Optional[Union[str, Path]]) -> IngestResult:
        """
        Normalize a JSON export of scrobbles and append the valid ones to the log.

        The whole file is parsed before anything is written, so a malformed
        file leaves the log untouched. Ingesting the same file twice stores
        its records twice.

        Raises:
            UsageError: If no input path was given
            InputFormatError: If the file is not JSON or not a JSON array
        """
        if not input_path:
            raise UsageError("Missing input file. Usage: scrobble-analytics ingest <path-to-json>")

        input_path = Path(input_path)
        logger.info(f"Ingesting scrobbles from {input_path}")
        raw_bytes = input_path.read_bytes()
        try:
            parsed = json.loads(raw_bytes.decode('utf-8'), parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            logger.error(f"Input file {input_path} is not valid JSON: {e}")
            raise InputFormatError(f"Input file {input_path} is not valid JSON: {e}") from e

        if not isinstance(parsed, list):
            raise InputFormatError("Input file must be a JSON array of scrobbles")

        return self.ingest_records(parsed)

    def ingest_records(self, items: Sequence[Any]) -> IngestResult:
        """Normalize raw entries and append the accepted ones; rejects are only counted"""
        valid = []
        for item in items:
            record = normalize_scrobble(item)
            if record is not None:
                valid.append(record)
        skipped = len(items) - len(valid)

        ensure_dir(self.settings.DATA_DIR)
        self.store.append(valid)

        logger.info(f"Ingested {len(valid)} records, skipped {skipped}")
        return IngestResult(
            ingested=len(valid),
            skipped=skipped,
            output_path=self.store.path
        )

    def build(self) -> BuildResult:
        """Re-read the entire log, aggregate it and overwrite the snapshot artifact"""
        ensure_dir(self.settings.DATA_DIR)
        ensure_dir(self.settings.OUTPUT_DIR)

        records = self.store.read_all()
        snapshot = self.aggregator.aggregate(records)
        output_path = write_snapshot(self.settings.analytics_path, snapshot)

        logger.info(f"Built analytics from {len(records)} records: {snapshot.totals}")
        return BuildResult(processed=len(records), output_path=output_path)

    def fetch_lastfm(self, user: Optional[str], from_uts: Optional[int] = None,
                     api: Optional[LastFMAPI] = None) -> IngestResult:
        """
        Import a Last.fm user's recent tracks through the same path as file ingestion.

        Args:
            user: Last.fm user name
            from_uts: Only import scrobbles after this Unix timestamp
            api: Client to use instead of one built from settings
        """
        if not user:
            raise UsageError("Missing Last.fm user. Usage: scrobble-analytics fetch <lastfm-user>")

        if api is None:
            if not self.settings.LASTFM_API_KEY:
                raise ValueError("LASTFM_API_KEY setting is required to fetch from Last.fm")
            api = LastFMAPI(api_key=self.settings.LASTFM_API_KEY, base_url=self.settings.LASTFM_API_URL)

        items = api.fetch_recent_scrobbles(
            user,
            from_uts=from_uts,
            max_pages=self.settings.LASTFM_MAX_PAGES,
            limit=self.settings.LASTFM_PAGE_LIMIT
        )
        # Last.fm pages are newest first; the log is kept oldest first
        return self.ingest_records(list(reversed(items)))
