from app.services.analytics.analytics_service import AnalyticsService, bucket_key

__all__ = ["AnalyticsService", "bucket_key"]
