"""Canonical scrobble record persisted in the log"""
from pydantic import BaseModel, ConfigDict, Field

class ScrobbleRecord(BaseModel):
    """
    One listen of one track.

    Field names follow Python conventions; the persisted JSON uses the
    ``listenedAt`` key, so always dump with ``by_alias=True``.
    """
    artist: str = Field(min_length=1)
    track: str = Field(min_length=1)
    album: str = ""
    listened_at: int = Field(gt=0, alias="listenedAt", description="Unix seconds")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
