"""
Scraper package for schedule acquisition.

This package contains:
- Transport fallback fetcher with retry and backoff
- Schedule extraction heuristics
- Static fallback schedule
- MyAnimeList enrichment client
- MongoDB schedule store
"""

__version__ = "1.0.0"
