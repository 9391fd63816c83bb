"""
Domain services - business logic spanning multiple entities.
"""

from .engagement_metrics import DailyViews, EngagementMetricsService, SlideStats

__all__ = ["EngagementMetricsService", "SlideStats", "DailyViews"]
