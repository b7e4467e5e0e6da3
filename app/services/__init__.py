"""Services package."""
from app.services.review_service import (
    ReviewService,
    ReviewSnapshot,
    ReviewNotFoundError,
)
from app.services.analytics_service import compute_analytics
from app.services.category_detector import detect_categories, default_category_ranges
from app.services.review_filter import filter_reviews
from app.services.review_normalizer import normalize_review, normalize_reviews
from app.services.review_sorter import sort_reviews

__all__ = [
    "ReviewService",
    "ReviewSnapshot",
    "ReviewNotFoundError",
    "compute_analytics",
    "detect_categories",
    "default_category_ranges",
    "filter_reviews",
    "normalize_review",
    "normalize_reviews",
    "sort_reviews",
]
