"""
Unit tests for snapshot change detection.
"""

import pytest

from scheduler.change_detector import ChangeDetector
from scheduler.models import ChangeKind


class TestChangeDetector:
    """Test cases for ChangeDetector class."""

    @pytest.fixture
    def detector(self):
        return ChangeDetector(timezone_label="JST")

    def test_time_change_and_new_show(self, detector, make_entry):
        """Test a moved show and a new show are both reported."""
        previous = [make_entry(title="Show X", day="Friday", time="20:00", episode="5")]
        current = [
            make_entry(title="Show X", day="Friday", time="21:00", episode="5"),
            make_entry(title="Show Y", day="Monday", time="10:00", episode="1"),
        ]

        changes = detector.detect_changes(current, previous)

        assert [(c.kind, c.title) for c in changes] == [
            (ChangeKind.TIME_CHANGE, "Show X"),
            (ChangeKind.NEW, "Show Y"),
        ]
        assert changes[0].previous_value == "20:00"
        assert changes[0].new_value == "21:00"
        assert changes[0].details == "Air time changed from 20:00 to 21:00"
        assert changes[1].details == "New show added to schedule: Monday at 10:00 JST"

    def test_identical_snapshots(self, detector, make_entry):
        """Test comparing a snapshot with itself yields nothing."""
        snapshot = [make_entry(), make_entry(title="Show Y", day="Monday")]

        assert detector.detect_changes(snapshot, snapshot) == []

    def test_cancellations_appended_last(self, detector, make_entry):
        """Test shows missing from the current snapshot are reported after everything else."""
        previous = [make_entry(title="Gone Show"), make_entry(title="Show X")]
        current = [make_entry(title="Show X", episode="6"), make_entry(title="Fresh Show")]

        changes = detector.detect_changes(current, previous)

        assert [c.kind for c in changes] == [
            ChangeKind.EPISODE_UPDATE,
            ChangeKind.NEW,
            ChangeKind.CANCELLATION,
        ]
        assert changes[-1].title == "Gone Show"
        assert changes[-1].details == "Show removed from schedule (possible cancellation or season end)"

    def test_day_change_is_neutral(self, detector, make_entry):
        """Test a day move is reported as a plain day change."""
        previous = [make_entry(day="Friday")]
        current = [make_entry(day="Thursday")]

        changes = detector.detect_changes(current, previous)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.DAY_CHANGE
        assert changes[0].details == "Broadcast day changed from Friday to Thursday"

    def test_multiple_changes_for_one_show(self, detector, make_entry):
        """Test each differing field produces its own record."""
        previous = [make_entry(day="Friday", time="20:00", episode="5")]
        current = [make_entry(day="Saturday", time="21:00", episode="6")]

        kinds = [c.kind for c in detector.detect_changes(current, previous)]

        assert kinds == [ChangeKind.TIME_CHANGE, ChangeKind.DAY_CHANGE, ChangeKind.EPISODE_UPDATE]

    def test_every_title_accounted_for(self, detector, make_entry):
        """Test new and cancellation records cover exactly the title differences."""
        previous = [make_entry(title=t) for t in ["A", "B", "C"]]
        current = [make_entry(title=t) for t in ["B", "C", "D", "E"]]

        changes = detector.detect_changes(current, previous)

        assert {c.title for c in changes if c.kind == ChangeKind.NEW} == {"D", "E"}
        assert {c.title for c in changes if c.kind == ChangeKind.CANCELLATION} == {"A"}

    def test_shared_detection_timestamp(self, detector, make_entry):
        """Test all records of one batch carry the same timestamp."""
        previous = [make_entry(title="A"), make_entry(title="B")]
        current = [make_entry(title="C"), make_entry(title="D")]

        changes = detector.detect_changes(current, previous)

        assert len(changes) == 4
        assert len({c.detected_at for c in changes}) == 1

    def test_repeated_detection_is_identical(self, detector, make_entry):
        """Test running the same comparison twice yields the same records in the same order."""
        previous = [
            make_entry(title="Timed Show", time="20:00"),
            make_entry(title="Moved Show", day="Friday"),
            make_entry(title="Ongoing Show", episode="5"),
            make_entry(title="Gone Show"),
        ]
        current = [
            make_entry(title="Timed Show", time="21:00"),
            make_entry(title="Moved Show", day="Sunday"),
            make_entry(title="Ongoing Show", episode="6"),
            make_entry(title="Fresh Show"),
        ]

        first = detector.detect_changes(current, previous)
        second = detector.detect_changes(current, previous)

        assert [c.kind for c in first] == [
            ChangeKind.TIME_CHANGE,
            ChangeKind.DAY_CHANGE,
            ChangeKind.EPISODE_UPDATE,
            ChangeKind.NEW,
            ChangeKind.CANCELLATION,
        ]
        assert [c.model_dump(exclude={"detected_at"}) for c in first] == \
            [c.model_dump(exclude={"detected_at"}) for c in second]

    def test_title_matching_ignores_case_and_spacing(self, detector, make_entry):
        previous = [make_entry(title="Spy x Family  Season 3")]
        current = [make_entry(title="SPY X FAMILY Season 3")]

        assert detector.detect_changes(current, previous) == []

    def test_custom_title_key(self, make_entry):
        """Test the equality strategy can be replaced."""
        detector = ChangeDetector(key=lambda title: title)
        previous = [make_entry(title="show x")]
        current = [make_entry(title="Show X")]

        kinds = [c.kind for c in detector.detect_changes(current, previous)]

        assert kinds == [ChangeKind.NEW, ChangeKind.CANCELLATION]

    def test_summarize(self, detector, make_entry):
        """Test the batch summary counts changes per kind."""
        previous = [make_entry(title="Gone Show")]
        current = [make_entry(title="A"), make_entry(title="B")]
        changes = detector.detect_changes(current, previous)

        result = detector.summarize(changes, current_count=2, previous_count=1)

        assert result.changes_detected == 3
        assert result.changes_by_kind == {ChangeKind.NEW: 2, ChangeKind.CANCELLATION: 1}
        assert result.detected_at == changes[0].detected_at
        assert result.current_count == 2
        assert result.detection_id
