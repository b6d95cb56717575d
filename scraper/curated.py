"""
Hand-maintained keyword tables used by the extraction and forecasting heuristics.

The tables are plain data on a pydantic model so callers (and tests) can pass
their own instead of the module default.
"""

from typing import List
from pydantic import BaseModel, Field


class CuratedLists(BaseModel):
    """Title and keyword lookup tables. All entries are matched lowercase, by substring."""

    trending_indicators: List[str] = Field(
        default_factory=lambda: ["trending", "popular", "hot", "top", "featured"],
        description="Keywords in an item's class list or text that flag it as trending"
    )
    known_trending: List[str] = Field(
        default_factory=lambda: [
            "one piece", "demon slayer", "spy x family", "jujutsu kaisen",
            "one punch man", "attack on titan", "my hero academia", "chainsaw man",
            "blue lock", "solo leveling", "frieren", "oshi no ko",
        ],
        description="Titles always treated as trending"
    )
    long_running: List[str] = Field(
        default_factory=lambda: [
            "one piece", "boruto", "dragon ball", "detective conan", "case closed",
            "pokemon", "naruto", "bleach", "fairy tail", "black clover",
        ],
        description="Year-round shows; projected 52 episodes ahead"
    )
    two_cour: List[str] = Field(
        default_factory=lambda: ["kingdom", "frieren", "mushoku tensei"],
        description="Shows expected to run about 24 episodes"
    )

    def is_known_trending(self, title: str) -> bool:
        return _matches(title, self.known_trending)

    def is_long_running(self, title: str) -> bool:
        return _matches(title, self.long_running)

    def is_two_cour(self, title: str) -> bool:
        return _matches(title, self.two_cour)

    def has_trending_indicator(self, text: str) -> bool:
        return _matches(text, self.trending_indicators)


def _matches(text: str, keywords: List[str]) -> bool:
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


DEFAULT_CURATED_LISTS = CuratedLists()
