"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock

from scraper.database import ScheduleStore
from scraper.models import ScheduleEntry


# Wednesday
REFERENCE_DATE = date(2026, 10, 21)


@pytest.fixture
def reference_date():
    """Fixed calendar date air dates are computed from."""
    return REFERENCE_DATE


@pytest.fixture
def mock_store():
    """Create a mock schedule store for testing."""
    store = AsyncMock(spec=ScheduleStore)
    store.get_snapshot.return_value = None
    store.get_forecast.return_value = None
    store.get_forecasts.return_value = []
    store.put_forecast.return_value = None
    return store


@pytest.fixture
def make_entry():
    """Factory for schedule entries with sensible defaults."""
    def _make_entry(title="Show X", day="Friday", time="20:00", episode="5", **kwargs):
        return ScheduleEntry(
            title=title,
            day_of_week=day,
            air_time=time,
            episode_label=episode,
            air_date=kwargs.pop("air_date", "2026-10-23"),
            **kwargs
        )
    return _make_entry


@pytest.fixture
def sample_schedule_html():
    """Day-grouped schedule page, long enough to pass the body length check."""
    filler = "<!-- " + "padding " * 150 + "-->"
    return f"""
    <html>
        <head><title>Anime Schedule</title></head>
        <body>
            {filler}
            <div class="schedule-container">
                <div class="schedule-block">
                    <h2>Saturday</h2>
                    <ul>
                        <li class="anime-item">
                            <span class="title">Kingdom: Season 6</span>
                            <span class="time">18:58</span>
                            <span class="episode">EP 13</span>
                            <img src="https://cdn.example.com/kingdom.jpg">
                            <span class="genre">Action, Historical</span>
                        </li>
                        <li class="anime-item trending">
                            <span class="title">Spy x Family Season 3</span>
                            <span class="time">15:15</span>
                            <span class="episode">Episode 13</span>
                        </li>
                    </ul>
                </div>
                <div class="schedule-block">
                    <h2>Sunday</h2>
                    <ul>
                        <li class="anime-item">
                            <span class="title">One Piece</span>
                            <span class="time">16:05</span>
                            <span class="episode">1155</span>
                            <span class="tag">Action</span>
                            <span class="tag">Adventure</span>
                        </li>
                    </ul>
                </div>
            </div>
        </body>
    </html>
    """


@pytest.fixture
def sample_flat_html():
    """Ungrouped schedule page with show cards inside day sections."""
    return """
    <html>
        <body>
            <section>
                <p>Shows airing Monday</p>
                <article>
                    <h3>Ninja vs. Gokudo</h3>
                    <div class="air-time">17:55</div>
                    <div class="episode-number">Ep. 13</div>
                    <img data-src="https://cdn.example.com/ninja.jpg">
                </article>
            </section>
            <section>
                <p>Coming soon</p>
                <article>
                    <h3>Mystery Show</h3>
                </article>
            </section>
        </body>
    </html>
    """
