"""
Unit tests for schedule extraction.
Tests both layout tiers, field defaults and candidate ordering.
"""

import pytest
from unittest.mock import Mock

from bs4 import BeautifulSoup

from scraper.curated import CuratedLists
from scraper.extractor import (
    BlockScheduleExtractor,
    FlatItemExtractor,
    ScheduleExtractor,
)


class TestBlockScheduleExtractor:
    """Test cases for the day-grouped layout."""

    @pytest.fixture
    def extractor(self):
        return ScheduleExtractor()

    def test_extracts_day_blocks(self, extractor, sample_schedule_html, reference_date):
        """Test every show is found under its day header."""
        entries = extractor.extract(sample_schedule_html, reference_date)

        assert [e.title for e in entries] == ["Kingdom: Season 6", "Spy x Family Season 3", "One Piece"]
        assert [e.day_of_week for e in entries] == ["Saturday", "Saturday", "Sunday"]

    def test_entry_fields(self, extractor, sample_schedule_html, reference_date):
        """Test field extraction for a fully populated item."""
        kingdom = extractor.extract(sample_schedule_html, reference_date)[0]

        assert kingdom.air_time == "18:58"
        assert kingdom.episode_label == "13"
        assert kingdom.image_url == "https://cdn.example.com/kingdom.jpg"
        assert kingdom.genre == "Action, Historical"
        assert kingdom.air_date == "2026-10-24"
        assert kingdom.is_trending is False

    def test_trending_detection(self, extractor, sample_schedule_html, reference_date):
        """Test trending comes from class indicators or the known-trending list."""
        entries = {e.title: e for e in extractor.extract(sample_schedule_html, reference_date)}

        assert entries["Spy x Family Season 3"].is_trending is True
        assert entries["One Piece"].is_trending is True

    def test_genre_from_tags(self, extractor, sample_schedule_html, reference_date):
        """Test tag elements are joined when there is no genre element."""
        entries = {e.title: e for e in extractor.extract(sample_schedule_html, reference_date)}

        assert entries["One Piece"].genre == "Action, Adventure"
        assert entries["Spy x Family Season 3"].genre == "Anime"

    def test_defaults_for_missing_fields(self, reference_date):
        """Test missing time and episode fall back to TBA and New."""
        html = """
        <div class="schedule-block">
            <h3>Tuesday</h3>
            <ul><li><a href="/show">Bare Show</a></li></ul>
        </div>
        """
        entries = BlockScheduleExtractor(CuratedLists(known_trending=[])).extract(
            BeautifulSoup(html, 'html.parser'), reference_date
        )

        assert len(entries) == 1
        assert entries[0].title == "Bare Show"
        assert entries[0].air_time == "TBA"
        assert entries[0].episode_label == "New"
        assert entries[0].image_url == ""

    def test_items_without_title_dropped(self, extractor, reference_date):
        """Test items with no title text are skipped."""
        html = """
        <div class="schedule-block">
            <h2>Monday</h2>
            <ul>
                <li class="anime-item"><span class="time">10:00</span></li>
                <li class="anime-item"><span class="title">Kept Show</span></li>
            </ul>
        </div>
        """
        entries = extractor.extract(html, reference_date)

        assert [e.title for e in entries] == ["Kept Show"]

    def test_no_blocks_means_no_match(self, reference_date):
        """Test the block tier signals no match instead of an empty list."""
        soup = BeautifulSoup("<html><body><p>nothing</p></body></html>", 'html.parser')

        assert BlockScheduleExtractor().extract(soup, reference_date) is None


class TestFlatItemExtractor:
    """Test cases for the ungrouped layout."""

    @pytest.fixture
    def extractor(self):
        return ScheduleExtractor()

    def test_day_inferred_from_section(self, extractor, sample_flat_html, reference_date):
        """Test the day comes from the enclosing section text."""
        entries = extractor.extract(sample_flat_html, reference_date)

        ninja = entries[0]
        assert ninja.title == "Ninja vs. Gokudo"
        assert ninja.day_of_week == "Monday"
        assert ninja.air_time == "17:55"
        assert ninja.episode_label == "13"
        assert ninja.image_url == "https://cdn.example.com/ninja.jpg"
        assert ninja.air_date == "2026-10-26"

    def test_unknown_day_uses_reference_date(self, extractor, sample_flat_html, reference_date):
        """Test shows without a recognisable day are kept as Unknown."""
        mystery = extractor.extract(sample_flat_html, reference_date)[1]

        assert mystery.day_of_week == "Unknown"
        assert mystery.air_date == reference_date.isoformat()

    def test_flat_tier_name(self):
        assert FlatItemExtractor.name == "flat"


class TestScheduleExtractor:
    """Test cases for the candidate pipeline."""

    def test_empty_document(self, reference_date):
        """Test empty input yields an empty list."""
        assert ScheduleExtractor().extract("", reference_date) == []

    def test_unrecognised_document(self, reference_date):
        """Test pages matching no candidate yield an empty list."""
        assert ScheduleExtractor().extract("<html><body><p>Blocked</p></body></html>", reference_date) == []

    def test_first_non_empty_candidate_wins(self, make_entry, reference_date):
        """Test later candidates run only when earlier ones find nothing."""
        entry = make_entry()
        no_match = Mock()
        no_match.name = "no_match"
        no_match.extract.return_value = None
        empty = Mock()
        empty.name = "empty"
        empty.extract.return_value = []
        winner = Mock()
        winner.name = "winner"
        winner.extract.return_value = [entry]
        never = Mock()
        never.name = "never"

        extractor = ScheduleExtractor(candidates=[no_match, empty, winner, never])
        result = extractor.extract("<html></html>", reference_date)

        assert result == [entry]
        never.extract.assert_not_called()

    def test_candidate_errors_are_contained(self, make_entry, reference_date):
        """Test a failing candidate is logged and skipped."""
        entry = make_entry()
        broken = Mock()
        broken.name = "broken"
        broken.extract.side_effect = AttributeError("unexpected layout")
        fallback = Mock()
        fallback.name = "fallback"
        fallback.extract.return_value = [entry]

        result = ScheduleExtractor(candidates=[broken, fallback]).extract("<html></html>", reference_date)

        assert result == [entry]

    def test_injected_curated_lists(self, reference_date):
        """Test curated lists can be substituted."""
        html = """
        <div class="schedule-block">
            <h2>Friday</h2>
            <ul><li class="anime-item"><span class="title">Obscure Show</span></li></ul>
        </div>
        """
        curated = CuratedLists(known_trending=["obscure"])

        entries = ScheduleExtractor(curated=curated).extract(html, reference_date)

        assert entries[0].is_trending is True
