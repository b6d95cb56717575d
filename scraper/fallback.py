"""
Static schedule returned when every transport fails.
Maintained by hand; air dates are recomputed for the reference date on every call.
"""

from datetime import date
from typing import List, Optional

from .date_math import air_date_for, today as current_date
from .models import ScheduleEntry

_CDN = "https://cdn.myanimelist.net/images/anime"

# (title, day, time, episode, image path, trending, genre)
FALLBACK_SCHEDULE = [
    ("Demon Slayer: Kimetsu no Yaiba - Infinity Castle", "Thursday", "19:11", "Movie", "1286/99889.jpg", True, "Action, Supernatural"),
    ("This Monster Wants to Eat Me", "Thursday", "Released", "13", "1015/143559.jpg", False, "Horror"),
    ("So You're Raising a Warrior", "Friday", "03:00", "11", "1706/144109.jpg", False, "Fantasy"),
    ("Tougen Anki", "Friday", "15:40", "24", "1100/141874.jpg", True, "Action, Supernatural"),
    ("Ganglion", "Friday", "16:50", "13", "1908/143206.jpg", False, "Horror"),
    ("Spy x Family Season 3", "Saturday", "15:15", "13", "1506/138982.jpg", True, "Action, Comedy"),
    ("To Your Eternity Season 3", "Saturday", "16:00", "13", "1271/138435.jpg", True, "Drama, Fantasy"),
    ("Kingdom: Season 6", "Saturday", "18:58", "13", "1809/143011.jpg", False, "Action, Historical"),
    ("One Piece", "Sunday", "16:05", "1155", "1244/138851.jpg", True, "Action, Adventure"),
    ("One-Punch Man Season 3", "Sunday", "16:25", "12", "1247/142693.jpg", True, "Action, Comedy"),
    ("A Mangaka's Weirdly Wonderful Workplace", "Monday", "13:10", "13", "1320/143874.jpg", False, "Comedy, Slice of Life"),
    ("Plus-sized Misadventures in Love!", "Monday", "15:10", "13", "1736/143736.jpg", False, "Romance"),
    ("Chitose Is in the Ramune Bottle", "Tuesday", "16:40", "10", "1741/143233.jpg", False, "Romance, School"),
    ("Ninja vs. Gokudo", "Tuesday", "17:55", "13", "1522/144147.jpg", False, "Action"),
    ("The Blue Orchestra Season 2", "Tuesday", "21:50", "13", "1796/143796.jpg", True, "Music, Drama"),
    ("Forget That Night, Your Majesty", "Wednesday", "13:01", "13", "1926/143926.jpg", False, "Romance, Fantasy"),
    ("Monster Strike: Deadverse Reloaded", "Wednesday", "14:44", "5", "1875/143875.jpg", False, "Action"),
]


def get_fallback_schedule(reference: Optional[date] = None) -> List[ScheduleEntry]:
    """
    Build fresh entries for the fallback schedule.

    Args:
        reference: Date the air dates are computed from (defaults to today, UTC)

    Returns:
        List of ScheduleEntry instances, one per fallback show
    """
    reference = reference or current_date()
    return [
        ScheduleEntry(
            title=title,
            day_of_week=day,
            air_time=time,
            episode_label=episode,
            image_url=f"{_CDN}/{image}",
            air_date=air_date_for(day, reference),
            is_trending=trending,
            genre=genre,
        )
        for title, day, time, episode, image, trending, genre in FALLBACK_SCHEDULE
    ]
