"""
Title normalization shared by diffing and forecasting.

Shows are identified by title rather than a surrogate id; every comparison
goes through ``title_key`` so the matching policy lives in one place.
"""

import re
from typing import Callable

TitleKey = Callable[[str], str]

_SHOW_ID_PATTERN = re.compile(r"[^a-z0-9]")


def title_key(title: str) -> str:
    """Case-insensitive, whitespace-insensitive key for a title."""
    return " ".join(title.split()).casefold()


def make_show_id(title: str) -> str:
    """
    Deterministic document id for a show.

    Lowercases the title and replaces each character outside ``[a-z0-9]``
    with ``-``, e.g. ``"Kingdom: Season 6"`` -> ``"kingdom--season-6"``.
    """
    return _SHOW_ID_PATTERN.sub("-", title.lower())
