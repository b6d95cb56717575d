"""
Scheduler package for schedule change tracking and episode forecasting.

This package contains:
- Title keys used to match shows across snapshots
- Change detection engine
- Episode forecaster
- Daily acquire-and-diff pipeline
"""

__version__ = "1.0.0"
