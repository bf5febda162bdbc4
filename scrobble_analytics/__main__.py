"""Entry point for scrobble ingestion and analytics builds"""
import logging
import sys
from typing import List, Optional

import requests

from scrobble_analytics.config import Settings, settings as default_settings
from scrobble_analytics.errors import ScrobbleAnalyticsError
from scrobble_analytics.pipeline import ScrobblePipeline

logger = logging.getLogger(__name__)

USAGE = """Usage:
  scrobble-analytics ingest <path-to-json>
  scrobble-analytics build
  scrobble-analytics fetch <lastfm-user>"""

def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    """Run one command and return the process exit status."""
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args else None
    arg = args[1] if len(args) > 1 else None
    pipeline = ScrobblePipeline(settings or default_settings)

    try:
        if command == 'ingest':
            result = pipeline.ingest(arg)
            print(f"Ingested {result.ingested} records ({result.skipped} skipped) -> {result.output_path}")
            return 0

        if command == 'build':
            result = pipeline.build()
            print(f"Built analytics from {result.processed} records -> {result.output_path}")
            return 0

        if command == 'fetch':
            result = pipeline.fetch_lastfm(arg)
            print(f"Fetched {result.ingested} records ({result.skipped} skipped) "
                  f"from Last.fm user {arg} -> {result.output_path}")
            return 0
    except (ScrobbleAnalyticsError, OSError, ValueError, OverflowError, requests.RequestException) as e:
        logger.debug(f"{command} failed", exc_info=True)
        print(str(e), file=sys.stderr)
        return 1

    print(USAGE)
    return 1

def run() -> None:
    """Console script entry point"""
    logging.basicConfig(level=default_settings.LOG_LEVEL.upper(), format='%(message)s')
    sys.exit(main())

if __name__ == "__main__":
    run()
