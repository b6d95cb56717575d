"""
Models for change detection and episode forecasting.

This module defines Pydantic models for:
- Change records between two schedule snapshots
- Change detection batch summaries
- Projected episodes and per-show forecast records
- Acquire-and-diff cycle results
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, validator

from scraper.models import ScheduleSnapshot


class ChangeKind(str, Enum):
    """Types of changes that can be detected between two snapshots."""
    NEW = "new"
    TIME_CHANGE = "time_change"
    DAY_CHANGE = "day_change"
    EPISODE_UPDATE = "episode_update"
    CANCELLATION = "cancellation"


class ChangeRecord(BaseModel):
    """One detected difference between today's and a prior snapshot."""
    kind: ChangeKind = Field(..., description="Type of change detected")
    title: str = Field(..., description="Show title as it appears in the snapshot")
    details: str = Field(..., description="Human-readable change summary")
    previous_value: Optional[str] = Field(default=None, description="Value in the prior snapshot")
    new_value: Optional[str] = Field(default=None, description="Value in the current snapshot")
    detected_at: datetime = Field(..., description="Shared timestamp of the detection batch")

    class Config:
        """Pydantic configuration."""
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class ChangeDetectionResult(BaseModel):
    """Result of one snapshot comparison."""
    detection_id: str = Field(..., description="Unique detection run identifier")
    detected_at: datetime = Field(..., description="Timestamp shared by every change in the batch")
    current_count: int = Field(default=0)
    previous_count: int = Field(default=0)
    changes: List[ChangeRecord] = Field(default_factory=list)
    changes_by_kind: Dict[ChangeKind, int] = Field(default_factory=dict)

    @property
    def changes_detected(self) -> int:
        return len(self.changes)

    class Config:
        """Pydantic configuration."""
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class ProjectedEpisode(BaseModel):
    """A computed, unconfirmed future airing."""
    episode_number: int = Field(..., ge=1)
    date: str = Field(..., description="ISO air date")
    air_time: str = Field(default="TBA")
    confirmed: bool = Field(default=False)


class ForecastRecord(BaseModel):
    """Auto-scheduled future calendar for one show."""
    show_id: str = Field(..., description="Deterministic id derived from the title")
    title: str = Field(...)
    total_episode_count: int = Field(..., ge=1)
    current_episode: int = Field(..., ge=1)
    day_of_week: str = Field(...)
    air_time: str = Field(...)
    timezone_label: str = Field(default="JST")
    auto_scheduled: bool = Field(default=True)
    projected_episodes: List[ProjectedEpisode] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @validator('projected_episodes')
    def validate_projection_order(cls, v):
        """Projected episodes are kept sorted by episode number."""
        return sorted(v, key=lambda episode: episode.episode_number)

    class Config:
        """Pydantic configuration."""
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class CycleResult(BaseModel):
    """Outcome of one acquire-and-diff cycle."""
    snapshot: ScheduleSnapshot = Field(..., description="Snapshot persisted for today")
    previous_snapshot_found: bool = Field(default=False)
    detection: Optional[ChangeDetectionResult] = Field(
        default=None,
        description="Change detection result; None when there was no prior snapshot to compare"
    )
    degraded: bool = Field(default=False, description="Whether the fallback dataset was used")
    transport: Optional[str] = Field(default=None)
    attempts: int = Field(default=0, ge=0)

    @property
    def changes(self) -> List[ChangeRecord]:
        return self.detection.changes if self.detection else []
