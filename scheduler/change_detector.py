"""
Change detection engine for comparing schedule snapshots.

This module provides:
- Snapshot diffing keyed by normalized title
- Change classification (new, time, day, episode, cancellation)
- Batch summaries for logging and storage by the caller
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import structlog

from scheduler.models import ChangeDetectionResult, ChangeKind, ChangeRecord
from scheduler.title_keys import TitleKey, title_key
from scraper.models import ScheduleEntry
from utilities.config import config

logger = structlog.get_logger(__name__)


class ChangeDetector:
    """Engine for detecting changes between two schedule snapshots."""

    def __init__(self, key: TitleKey = title_key, timezone_label: Optional[str] = None):
        """
        Initialize change detector.

        Args:
            key: Title equality strategy used to match entries across snapshots
            timezone_label: Broadcast timezone shown in change details
        """
        self.key = key
        self.timezone_label = timezone_label or config.timezone_label
        self.logger = logger.bind(component="change_detector")

    def detect_changes(
        self,
        current: Sequence[ScheduleEntry],
        previous: Sequence[ScheduleEntry]
    ) -> List[ChangeRecord]:
        """
        Compare the current snapshot against a prior one.

        Args:
            current: Entries observed now
            previous: Entries from the prior snapshot

        Returns:
            Change records in current-snapshot order, cancellations last
        """
        detected_at = datetime.utcnow()
        changes: List[ChangeRecord] = []

        remaining: Dict[str, ScheduleEntry] = {}
        for entry in previous:
            remaining[self.key(entry.title)] = entry

        for today in current:
            key = self.key(today.title)
            yesterday = remaining.pop(key, None)

            if yesterday is None:
                changes.append(ChangeRecord(
                    kind=ChangeKind.NEW,
                    title=today.title,
                    details=f"New show added to schedule: {today.day_of_week} at {today.air_time} {self.timezone_label}",
                    new_value=today.day_of_week,
                    detected_at=detected_at
                ))
                continue

            changes.extend(self._compare_entries(yesterday, today, detected_at))

        for yesterday in remaining.values():
            changes.append(ChangeRecord(
                kind=ChangeKind.CANCELLATION,
                title=yesterday.title,
                details="Show removed from schedule (possible cancellation or season end)",
                previous_value=yesterday.day_of_week,
                detected_at=detected_at
            ))

        self.logger.debug(
            "Compared schedule snapshots",
            current=len(current),
            previous=len(previous),
            changes_detected=len(changes)
        )
        return changes

    def _compare_entries(
        self,
        yesterday: ScheduleEntry,
        today: ScheduleEntry,
        detected_at: datetime
    ) -> List[ChangeRecord]:
        """Field-by-field comparison of one show present in both snapshots."""
        changes = []

        if today.air_time != yesterday.air_time:
            changes.append(ChangeRecord(
                kind=ChangeKind.TIME_CHANGE,
                title=today.title,
                details=f"Air time changed from {yesterday.air_time} to {today.air_time}",
                previous_value=yesterday.air_time,
                new_value=today.air_time,
                detected_at=detected_at
            ))

        # Reported without direction: a show may move earlier as well as later
        if today.day_of_week != yesterday.day_of_week:
            changes.append(ChangeRecord(
                kind=ChangeKind.DAY_CHANGE,
                title=today.title,
                details=f"Broadcast day changed from {yesterday.day_of_week} to {today.day_of_week}",
                previous_value=yesterday.day_of_week,
                new_value=today.day_of_week,
                detected_at=detected_at
            ))

        if today.episode_label != yesterday.episode_label:
            changes.append(ChangeRecord(
                kind=ChangeKind.EPISODE_UPDATE,
                title=today.title,
                details=f"Episode updated from {yesterday.episode_label} to {today.episode_label}",
                previous_value=yesterday.episode_label,
                new_value=today.episode_label,
                detected_at=detected_at
            ))

        return changes

    def summarize(
        self,
        changes: List[ChangeRecord],
        current_count: int = 0,
        previous_count: int = 0
    ) -> ChangeDetectionResult:
        """
        Build a batch summary for a list of change records.

        Args:
            changes: Records from one detect_changes call
            current_count: Entries in the current snapshot
            previous_count: Entries in the prior snapshot

        Returns:
            ChangeDetectionResult with per-kind counts
        """
        changes_by_kind: Dict[ChangeKind, int] = {}
        for change in changes:
            changes_by_kind[change.kind] = changes_by_kind.get(change.kind, 0) + 1

        return ChangeDetectionResult(
            detection_id=str(uuid.uuid4()),
            detected_at=changes[0].detected_at if changes else datetime.utcnow(),
            current_count=current_count,
            previous_count=previous_count,
            changes=changes,
            changes_by_kind=changes_by_kind
        )
