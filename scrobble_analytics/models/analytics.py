"""AnalyticsSnapshot model definition"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Totals(_CamelModel):
    """Record and identity counts across the whole log"""
    scrobbles: int = 0
    unique_artists: int = 0
    unique_tracks: int = 0

class ListenRange(_CamelModel):
    """Earliest and latest listen, both None for an empty log"""
    first_listen: Optional[int] = None
    latest_listen: Optional[int] = None

class RankedEntry(_CamelModel):
    name: str
    count: int

class DayActivity(_CamelModel):
    day: str = Field(description="UTC calendar day, YYYY-MM-DD")
    count: int

class AnalyticsSnapshot(_CamelModel):
    """
    Summary statistics derived from the full scrobble log.

    Recomputed from scratch on every build and written as the snapshot
    artifact with camelCase keys:

        generatedAt: when the snapshot was computed (UTC)
        totals: scrobble count plus unique artist and track counts
        range: first and latest listen in Unix seconds
        topArtists / topTracks: descending by count, ties in first-seen order
        activityByDay: one bucket per day present, ascending
    """
    generated_at: datetime
    totals: Totals = Field(default_factory=Totals)
    listen_range: ListenRange = Field(default_factory=ListenRange, alias="range")
    top_artists: List[RankedEntry] = []
    top_tracks: List[RankedEntry] = []
    activity_by_day: List[DayActivity] = []
