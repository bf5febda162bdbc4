"""Scrobble log aggregation into summary statistics"""
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from scrobble_analytics.models.analytics import (
    AnalyticsSnapshot,
    DayActivity,
    ListenRange,
    RankedEntry,
    Totals,
)
from scrobble_analytics.models.scrobble import ScrobbleRecord

DEFAULT_TOP_LIMIT = 20
TRACK_KEY_SEPARATOR = " — "
SECONDS_PER_DAY = 86400

def track_key(record: ScrobbleRecord) -> str:
    """Identity of a track for counting: artist and title joined"""
    return f"{record.artist}{TRACK_KEY_SEPARATOR}{record.track}"

def _civil_from_days(days: int):
    """Proleptic Gregorian (year, month, day) for a count of days since 1970-01-01"""
    days += 719468
    era = days // 146097
    day_of_era = days - era * 146097
    year_of_era = (day_of_era - day_of_era // 1460 + day_of_era // 36524 - day_of_era // 146096) // 365
    day_of_year = day_of_era - (365 * year_of_era + year_of_era // 4 - year_of_era // 100)
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    return year_of_era + era * 400 + (month <= 2), month, day

def listen_day(listened_at: int) -> str:
    """
    UTC calendar day of a Unix timestamp as YYYY-MM-DD.

    Years outside 0000-9999 use the expanded ISO form (``+055840-01-01``),
    the same as JavaScript's ``toISOString``; datetime cannot represent them.
    """
    year, month, day = _civil_from_days(listened_at // SECONDS_PER_DAY)
    if 0 <= year <= 9999:
        year_text = f"{year:04d}"
    else:
        year_text = f"{'+' if year > 0 else '-'}{abs(year):06d}"
    return f"{year_text}-{month:02d}-{day:02d}"

class AnalyticsAggregator:
    """Folds a sequence of scrobbles into an AnalyticsSnapshot"""

    def __init__(self, top_limit: int = DEFAULT_TOP_LIMIT):
        if top_limit <= 0:
            raise ValueError("top_limit must be positive")
        self.top_limit = top_limit

    def aggregate(self, records: Iterable[ScrobbleRecord],
                  generated_at: Optional[datetime] = None) -> AnalyticsSnapshot:
        """
        Compute the snapshot in a single pass over the records.

        Args:
            records: Scrobbles in log order. Order only matters for
                breaking ties in the top lists.
            generated_at: Timestamp to stamp on the snapshot, now (UTC) by default
        """
        by_day: Counter = Counter()
        by_artist: Counter = Counter()
        by_track: Counter = Counter()
        first_listen: Optional[int] = None
        latest_listen: Optional[int] = None
        total = 0

        for record in records:
            total += 1
            by_day[listen_day(record.listened_at)] += 1
            by_artist[record.artist] += 1
            by_track[track_key(record)] += 1

            if first_listen is None or record.listened_at < first_listen:
                first_listen = record.listened_at
            if latest_listen is None or record.listened_at > latest_listen:
                latest_listen = record.listened_at

        return AnalyticsSnapshot(
            generated_at=generated_at or datetime.now(timezone.utc),
            totals=Totals(
                scrobbles=total,
                unique_artists=len(by_artist),
                unique_tracks=len(by_track)
            ),
            listen_range=ListenRange(first_listen=first_listen, latest_listen=latest_listen),
            top_artists=self.top_entries(by_artist),
            top_tracks=self.top_entries(by_track),
            activity_by_day=[
                DayActivity(day=day, count=count)
                for day, count in sorted(by_day.items())
            ]
        )

    def top_entries(self, counts: Counter) -> List[RankedEntry]:
        """Highest counts first; sorted() is stable so ties keep first-seen order"""
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [RankedEntry(name=name, count=count) for name, count in ranked[:self.top_limit]]

def aggregate(records: Iterable[ScrobbleRecord]) -> AnalyticsSnapshot:
    """Aggregate with the default top-list length"""
    return AnalyticsAggregator().aggregate(records)
