"""
Pydantic models for broadcast schedule data.
Implements the schedule entry and snapshot schemas plus acquisition results.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, validator

from .date_math import UNKNOWN_DAY, WEEKDAYS

DEFAULT_AIR_TIME = "TBA"
DEFAULT_EPISODE_LABEL = "New"
DEFAULT_GENRE = "Anime"


class ScheduleEntry(BaseModel):
    """
    One broadcast slot on the weekly schedule.
    """
    # Core slot information
    title: str = Field(..., description="Show title, the natural key for diffing")
    day_of_week: str = Field(default=UNKNOWN_DAY, description="Canonical weekday name or 'Unknown'")
    air_time: str = Field(default=DEFAULT_AIR_TIME, description="Free-form broadcast time")
    episode_label: str = Field(default=DEFAULT_EPISODE_LABEL, description="Episode number or marker such as 'Movie'")
    air_date: str = Field(..., description="ISO date of the next occurrence of day_of_week")

    # Presentation
    is_trending: bool = Field(default=False, description="Whether the show is flagged as trending")
    genre: str = Field(default=DEFAULT_GENRE, description="Genre text")
    image_url: str = Field(default="", description="Cover image URL")

    # Optional enrichment
    total_episode_count: Optional[int] = Field(None, ge=1, description="Total episodes from the catalog")
    studio: Optional[str] = Field(None, description="Animation studio")
    rating_score: Optional[float] = Field(None, description="Catalog mean score")
    external_id: Optional[int] = Field(None, description="External catalog id")

    @validator('title')
    def validate_title(cls, v):
        """Titles are the only mandatory field."""
        v = v.strip()
        if not v:
            raise ValueError('title cannot be empty')
        return v

    @validator('day_of_week')
    def validate_day_of_week(cls, v):
        if v not in WEEKDAYS and v != UNKNOWN_DAY:
            raise ValueError(f'day_of_week must be one of {WEEKDAYS} or {UNKNOWN_DAY!r}')
        return v

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "title": "One Piece",
                "day_of_week": "Sunday",
                "air_time": "16:05",
                "episode_label": "1155",
                "air_date": "2026-10-25",
                "is_trending": True,
                "genre": "Action, Adventure",
                "image_url": "https://cdn.myanimelist.net/images/anime/1244/138851.jpg"
            }
        }


class ScheduleSnapshot(BaseModel):
    """
    Immutable, dated collection of schedule entries. One per acquisition cycle.
    """
    snapshot_date: str = Field(..., description="ISO calendar date the snapshot represents")
    entries: Tuple[ScheduleEntry, ...] = Field(default_factory=tuple)
    scraped_at: datetime = Field(default_factory=datetime.utcnow, description="When the snapshot was taken")
    degraded: bool = Field(default=False, description="Built from the fallback dataset")

    class Config:
        """Pydantic configuration."""
        frozen = True
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class EnrichmentData(BaseModel):
    """Catalog fields merged into a schedule entry."""
    total_episode_count: Optional[int] = None
    genre: Optional[str] = None
    studio: Optional[str] = None
    rating_score: Optional[float] = None
    external_id: Optional[int] = None

    @validator('total_episode_count')
    def validate_total(cls, v):
        # The catalog reports 0 for shows with an unannounced length
        if v is not None and v < 1:
            return None
        return v


class FetchResult(BaseModel):
    """
    Successful fetch through one of the transports.
    """
    document: str = Field(..., description="Raw response body")
    entries: List[ScheduleEntry] = Field(default_factory=list, description="Entries parsed from the body")
    transport: str = Field(..., description="Transport prefix that succeeded")
    attempts: int = Field(..., ge=1, description="Total attempts across all transports")
    failures: List[str] = Field(default_factory=list, description="Reasons of rejected attempts")


class AcquisitionResult(BaseModel):
    """
    Model for schedule acquisition results.
    """
    entries: List[ScheduleEntry] = Field(default_factory=list)
    degraded: bool = Field(default=False, description="Fallback dataset substituted for live data")
    transport: Optional[str] = Field(None, description="Transport that produced the data")
    attempts: int = Field(default=0, description="Fetch attempts made")
    failures: List[str] = Field(default_factory=list, description="Reasons of rejected attempts")
    duration_seconds: float = Field(default=0.0)
    acquired_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """Pydantic configuration."""
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }
