"""
Unit tests for the static fallback schedule.
"""

from datetime import date

from scraper.date_math import WEEKDAYS
from scraper.fallback import FALLBACK_SCHEDULE, get_fallback_schedule


class TestFallbackSchedule:
    """Test cases for get_fallback_schedule."""

    def test_returns_every_show(self, reference_date):
        entries = get_fallback_schedule(reference_date)

        assert len(entries) == len(FALLBACK_SCHEDULE) == 17
        assert all(entry.day_of_week in WEEKDAYS for entry in entries)

    def test_air_dates_follow_reference(self, reference_date):
        """Test air dates are recomputed for the given reference date."""
        entries = {e.title: e for e in get_fallback_schedule(reference_date)}

        assert entries["One Piece"].air_date == "2026-10-25"
        assert entries["Kingdom: Season 6"].air_date == "2026-10-24"
        assert entries["Forget That Night, Your Majesty"].air_date == "2026-10-21"

        later = {e.title: e for e in get_fallback_schedule(date(2026, 10, 26))}
        assert later["One Piece"].air_date == "2026-11-01"

    def test_returns_fresh_entries(self, reference_date):
        """Test callers cannot affect later calls."""
        first = get_fallback_schedule(reference_date)
        first.clear()

        assert len(get_fallback_schedule(reference_date)) == 17

    def test_entry_details(self, reference_date):
        one_piece = next(e for e in get_fallback_schedule(reference_date) if e.title == "One Piece")

        assert one_piece.air_time == "16:05"
        assert one_piece.episode_label == "1155"
        assert one_piece.is_trending is True
        assert one_piece.image_url.startswith("https://cdn.myanimelist.net/images/anime/")
