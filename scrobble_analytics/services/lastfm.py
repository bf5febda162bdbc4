"""Last.fm API integration service"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from scrobble_analytics.errors import ScrobbleAnalyticsError

logger = logging.getLogger(__name__)

# --- Constants for Fetching Control ---
# Last.fm caps user.getRecentTracks at 200 tracks per page
MAX_PAGE_LIMIT = 200
# Base delay in seconds for retries on rate limit / server errors
RETRY_BASE_DELAY = 1.5
# Small delay between pagination requests to be gentle on the API
PAGINATION_DELAY_SECONDS = 0.25
REQUEST_TIMEOUT_SECONDS = 15
# ------------------------------------

class LastFMError(ScrobbleAnalyticsError):
    """Error payload returned by the Last.fm API"""

    def __init__(self, code: Any, message: str):
        self.code = code
        super().__init__(f"Last.fm API error {code}: {message}")

def _text(value: Any) -> str:
    """Read a '#text' node, which Last.fm uses for artist and album names"""
    if isinstance(value, dict):
        value = value.get('#text')
    return value if isinstance(value, str) else ''

def to_raw_scrobble(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Convert one recent-track entry into the raw scrobble shape used by ingestion.

    Returns None for the now-playing entry, which has no timestamp yet. The
    result is still untrusted and goes through the normalizer.
    """
    if not isinstance(item, dict):
        return None
    if (item.get('@attr') or {}).get('nowplaying') == 'true':
        return None
    return {
        'artist': _text(item.get('artist')),
        'track': item.get('name'),
        'album': _text(item.get('album')),
        'listenedAt': (item.get('date') or {}).get('uts'),
    }

class LastFMAPI:
    """Handles Last.fm API interactions for recent-track history"""

    def __init__(self, api_key: str, base_url: str = "https://ws.audioscrobbler.com/2.0/"):
        if not api_key:
            raise ValueError("Last.fm API key cannot be empty")
        self.api_key = api_key
        self.base_url = base_url
        self.session = requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    def get_recent_tracks(self, user: str, page: int = 1, limit: int = MAX_PAGE_LIMIT,
                          from_uts: Optional[int] = None) -> Dict[str, Any]:
        """
        Get one page of a user's recent tracks

        Args:
            user: Last.fm user name
            page: 1-indexed page number
            limit: Tracks per page (max 200 per Last.fm API docs)
            from_uts: Only return scrobbles after this Unix timestamp
        """
        params = {
            'method': 'user.getRecentTracks',
            'user': user,
            'page': page,
            'limit': min(limit, MAX_PAGE_LIMIT),
        }
        if from_uts is not None:
            params['from'] = from_uts

        response_data = self._make_request(params)
        recent = response_data.get('recenttracks')
        if not isinstance(recent, dict):
            logger.warning(f"Unexpected response format for recent tracks: {response_data}")
            return {'track': [], '@attr': {}}
        return recent

    def fetch_recent_scrobbles(self, user: str, from_uts: Optional[int] = None,
                               max_pages: Optional[int] = None,
                               limit: int = MAX_PAGE_LIMIT) -> List[Dict[str, Any]]:
        """Walk the recent-tracks pages and return raw scrobble dicts, newest first"""
        collected: List[Dict[str, Any]] = []
        page = 1

        while True:
            logger.info(f"Fetching recent tracks for {user}, page {page}...")
            recent = self.get_recent_tracks(user, page=page, limit=limit, from_uts=from_uts)

            items = recent.get('track') or []
            # A single track comes back as an object rather than a list
            if isinstance(items, dict):
                items = [items]
            if not items:
                logger.info("No more recent tracks found.")
                break

            for item in items:
                raw = to_raw_scrobble(item)
                if raw is not None:
                    collected.append(raw)

            try:
                total_pages = int((recent.get('@attr') or {}).get('totalPages', 1))
            except (TypeError, ValueError):
                total_pages = 1
            if page >= total_pages:
                break
            if max_pages is not None and page >= max_pages:
                logger.info(f"Stopping after {max_pages} pages (of {total_pages}).")
                break
            page += 1
            time.sleep(PAGINATION_DELAY_SECONDS)

        logger.info(f"Fetched {len(collected)} recent tracks for {user} in {page} pages.")
        return collected

    def _make_request(self, params: Dict[str, Any], retries: int = 3) -> Dict[str, Any]:
        """Make a request to the Last.fm API with retries on rate limits and server errors"""
        query = dict(params, api_key=self.api_key, format='json')
        attempt = 0
        last_exception: Optional[Exception] = None

        while attempt < retries:
            attempt += 1
            try:
                logger.debug(f"Attempt {attempt}/{retries}: {params.get('method')} {params}")
                response = self.session.get(self.base_url, params=query, timeout=REQUEST_TIMEOUT_SECONDS)
                response.raise_for_status()
                try:
                    data = response.json()
                except ValueError:
                    logger.error(f"Failed to decode JSON response from Last.fm. Response text: {response.text[:200]}")
                    raise
                if isinstance(data, dict) and data.get('error'):
                    raise LastFMError(data.get('error'), data.get('message', 'unknown error'))
                return data if isinstance(data, dict) else {}
            except requests.exceptions.HTTPError as e:
                last_exception = e
                status = e.response.status_code if e.response is not None else 0
                if status == 429 or status >= 500:
                    logger.warning(f"Last.fm returned {status} on attempt {attempt}. Retrying...")
                else:
                    logger.error(f"Client error ({status}) from Last.fm. Aborting request.")
                    raise
            except requests.exceptions.RequestException as e:
                last_exception = e
                logger.warning(f"Request error on attempt {attempt}: {e}. Retrying...")

            if attempt < retries:
                sleep_time = RETRY_BASE_DELAY ** attempt
                logger.info(f"Waiting {sleep_time:.2f}s before next retry...")
                time.sleep(sleep_time)

        logger.error(f"Last.fm request failed after {retries} attempts.")
        raise last_exception or requests.exceptions.RetryError(f"Request failed after {retries} attempts")
