"""
Analytics package exports.
"""

from srs_core.analytics.metrics import daily_retention, forecast_due_counts
from srs_core.analytics.service import build_review_stats
from srs_core.analytics.types import ReviewStats

__all__ = [
    "daily_retention",
    "forecast_due_counts",
    "build_review_stats",
    "ReviewStats",
]
