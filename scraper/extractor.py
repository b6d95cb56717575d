"""
Schedule extraction from the raw schedule page.

The page layout is not under our control, so extraction is a pipeline of
independent candidate extractors tried in priority order. Each returns a list
of entries or ``None`` when its layout is not recognised; the first non-empty
list wins.
"""

import re
from datetime import date
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError
import structlog

from .curated import CuratedLists, DEFAULT_CURATED_LISTS
from .date_math import UNKNOWN_DAY, air_date_for, find_weekday_in_text, normalize_day, today as current_date
from .models import DEFAULT_AIR_TIME, DEFAULT_EPISODE_LABEL, DEFAULT_GENRE, ScheduleEntry

logger = structlog.get_logger(__name__)

_EPISODE_PATTERN = re.compile(r"ep(?:isode)?\.?\s*(\d+)", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"\d+")


class CandidateExtractor:
    """
    Base class for one extraction heuristic.
    """

    name = "candidate"

    def __init__(self, curated: CuratedLists = DEFAULT_CURATED_LISTS):
        self.curated = curated

    def extract(self, soup: BeautifulSoup, reference: date) -> Optional[List[ScheduleEntry]]:
        """Return entries, or None when the page does not have this layout."""
        raise NotImplementedError

    def _first_text(self, element: Tag, selectors: Sequence[str]) -> str:
        """Text of the first selector that matches, tried in priority order."""
        for selector in selectors:
            found = element.select_one(selector)
            if found:
                text = found.get_text(strip=True)
                if text:
                    return text
        return ""

    def _image_url(self, element: Tag) -> str:
        image = element.find('img')
        if not image:
            return ""
        return image.get('src') or image.get('data-src') or ""

    def _parse_episode(self, text: str) -> str:
        """Episode number from labels like 'EP 12', '12' or 'Episode 3 / 12'."""
        if not text:
            return DEFAULT_EPISODE_LABEL

        match = _EPISODE_PATTERN.search(text)
        if match:
            return match.group(1)

        match = _NUMBER_PATTERN.search(text)
        if match:
            return match.group(0)

        return DEFAULT_EPISODE_LABEL

    def _detect_trending(self, element: Tag, title: str) -> bool:
        class_list = " ".join(element.get('class', []))
        element_text = element.get_text(" ", strip=True)

        if self.curated.has_trending_indicator(class_list) or self.curated.has_trending_indicator(element_text):
            return True

        return self.curated.is_known_trending(title)

    def _extract_genre(self, element: Tag) -> str:
        genre_elem = element.select_one('.genre, .genres, [class*="genre"]')
        if genre_elem:
            text = genre_elem.get_text(strip=True)
            if text:
                return text

        tags = [tag.get_text(strip=True) for tag in element.select('.tag, .genre-tag')]
        tags = [tag for tag in tags if tag]
        if tags:
            return ", ".join(tags)

        return DEFAULT_GENRE

    def _build_entry(
        self,
        element: Tag,
        title: str,
        day: str,
        air_time: str,
        episode_text: str,
        reference: date
    ) -> Optional[ScheduleEntry]:
        """Build an entry, dropping the item if it does not validate."""
        try:
            return ScheduleEntry(
                title=title,
                day_of_week=day,
                air_time=air_time or DEFAULT_AIR_TIME,
                episode_label=self._parse_episode(episode_text),
                air_date=air_date_for(day, reference),
                is_trending=self._detect_trending(element, title),
                genre=self._extract_genre(element),
                image_url=self._image_url(element),
            )
        except ValidationError as e:
            logger.debug("Discarded schedule item", extractor=self.name, title=title, error=str(e))
            return None


class BlockScheduleExtractor(CandidateExtractor):
    """
    Day-grouped layout: one container per weekday with a header and a list of shows.
    """

    name = "block"

    BLOCK_SELECTOR = '.schedule-block, .anime-schedule, [class*="schedule"]'
    HEADER_SELECTOR = 'h2, h3, .day-header'
    ITEM_SELECTOR = '.anime-item, li, .schedule-anime'
    TITLE_SELECTORS = ['.title', 'h4', 'a']
    TIME_SELECTORS = ['.time', '.release-time']
    EPISODE_SELECTORS = ['.episode']

    def extract(self, soup: BeautifulSoup, reference: date) -> Optional[List[ScheduleEntry]]:
        blocks = self._day_blocks(soup)
        if not blocks:
            return None

        entries = []
        for block in blocks:
            header = block.select_one(self.HEADER_SELECTOR)
            day = normalize_day(header.get_text(" ", strip=True)) if header else UNKNOWN_DAY

            for item in block.select(self.ITEM_SELECTOR):
                title = self._first_text(item, self.TITLE_SELECTORS)
                if not title:
                    continue

                entry = self._build_entry(
                    item,
                    title=title,
                    day=day,
                    air_time=self._first_text(item, self.TIME_SELECTORS),
                    episode_text=self._first_text(item, self.EPISODE_SELECTORS),
                    reference=reference,
                )
                if entry:
                    entries.append(entry)

        return entries

    def _day_blocks(self, soup: BeautifulSoup) -> List[Tag]:
        """Innermost schedule containers that carry a day header."""
        candidates = [
            block for block in soup.select(self.BLOCK_SELECTOR)
            if block.select_one(self.HEADER_SELECTOR)
        ]
        return [
            block for block in candidates
            if not any(
                other is not block and any(parent is block for parent in other.parents)
                for other in candidates
            )
        ]


class FlatItemExtractor(CandidateExtractor):
    """
    Ungrouped layout: standalone show cards, day inferred from the enclosing section.
    """

    name = "flat"

    ITEM_SELECTOR = '.anime-item, .schedule-item, article'
    TITLE_SELECTORS = ['h3', 'h4', '.title', '[class*="title"]']
    TIME_SELECTORS = ['.time', '[class*="time"]']
    EPISODE_SELECTORS = ['.episode', '[class*="episode"]']

    def extract(self, soup: BeautifulSoup, reference: date) -> Optional[List[ScheduleEntry]]:
        items = self._outermost(soup.select(self.ITEM_SELECTOR))
        if not items:
            return None

        entries = []
        for item in items:
            title = self._first_text(item, self.TITLE_SELECTORS)
            if not title:
                continue

            section = item.find_parent('section')
            day = find_weekday_in_text(section.get_text(" ", strip=True)) if section else UNKNOWN_DAY

            entry = self._build_entry(
                item,
                title=title,
                day=day,
                air_time=self._first_text(item, self.TIME_SELECTORS),
                episode_text=self._first_text(item, self.EPISODE_SELECTORS),
                reference=reference,
            )
            if entry:
                entries.append(entry)

        return entries

    def _outermost(self, items: List[Tag]) -> List[Tag]:
        selected = {id(item) for item in items}
        return [
            item for item in items
            if not any(id(parent) in selected for parent in item.parents)
        ]


class ScheduleExtractor:
    """
    Runs the candidate extractors in order and returns the first non-empty result.
    """

    def __init__(
        self,
        candidates: Optional[Iterable[CandidateExtractor]] = None,
        curated: CuratedLists = DEFAULT_CURATED_LISTS
    ):
        if candidates is None:
            candidates = [BlockScheduleExtractor(curated), FlatItemExtractor(curated)]
        self.candidates = list(candidates)
        self.logger = logger.bind(component="schedule_extractor")

    def extract(self, document: str, reference: Optional[date] = None) -> List[ScheduleEntry]:
        """
        Parse a schedule page into entries.

        Args:
            document: Raw HTML of the schedule page
            reference: Date air dates are computed from (defaults to today, UTC)

        Returns:
            List of ScheduleEntry instances; empty when nothing usable was found
        """
        if not document:
            return []

        reference = reference or current_date()

        try:
            soup = BeautifulSoup(document, 'html.parser')
        except Exception as e:
            self.logger.error("Failed to parse schedule document", error=str(e))
            return []

        for candidate in self.candidates:
            try:
                entries = candidate.extract(soup, reference)
            except Exception as e:
                self.logger.warning(
                    "Candidate extractor failed",
                    extractor=candidate.name,
                    error=str(e)
                )
                continue

            if entries:
                self.logger.debug(
                    "Schedule extracted",
                    extractor=candidate.name,
                    entries=len(entries)
                )
                return entries

        self.logger.debug("No candidate extractor matched the document")
        return []
