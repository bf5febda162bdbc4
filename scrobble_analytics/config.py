"""Application configuration and environment settings"""
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Storage locations
    DATA_DIR: Path = Field(Path("data"), description="Directory holding the scrobble log")
    OUTPUT_DIR: Path = Field(Path("out"), description="Directory for the analytics snapshot")
    SCROBBLES_FILE: str = Field("scrobbles.ndjson", description="File name of the append-only scrobble log")
    ANALYTICS_FILE: str = Field("analytics.json", description="File name of the analytics snapshot")

    # Aggregation
    TOP_LIMIT: int = Field(20, gt=0, description="Number of entries kept in the top artist/track lists")

    # Last.fm import
    LASTFM_API_KEY: Optional[str] = Field(None, description="Last.fm API key (read-only access)")
    LASTFM_API_URL: str = Field("https://ws.audioscrobbler.com/2.0/", description="Last.fm API root")
    LASTFM_PAGE_LIMIT: int = Field(200, gt=0, le=200, description="Tracks requested per recent-tracks page")
    LASTFM_MAX_PAGES: Optional[int] = Field(None, gt=0, description="Stop fetching after this many pages")

    LOG_LEVEL: str = Field("INFO", description="Root logging level for the command-line entry point")

    @property
    def scrobbles_path(self) -> Path:
        """Full path of the scrobble log"""
        return self.DATA_DIR / self.SCROBBLES_FILE

    @property
    def analytics_path(self) -> Path:
        """Full path of the analytics snapshot"""
        return self.OUTPUT_DIR / self.ANALYTICS_FILE

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True
    )

settings = Settings()
