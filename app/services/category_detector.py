"""Discovery of the rating-category vocabulary present in a collection."""
from typing import Iterable

from app.models.review import Review
from app.models.review_filter import FULL_RANGE


def detect_categories(reviews: Iterable[Review]) -> list[str]:
    """Sorted distinct category names across all reviews.

    Entries without a string name are ignored. The result is sorted so filter
    controls, sort options and chart axes stay stable across refreshes.
    """
    categories: set[str] = set()
    for review in reviews:
        for entry in review.review_category:
            if isinstance(entry.category, str) and entry.category:
                categories.add(entry.category)
    return sorted(categories)


def default_category_ranges(categories: Iterable[str]) -> dict[str, tuple[float, float]]:
    """Initial (unrestricted) 0-10 range for every category."""
    return {category: FULL_RANGE for category in categories}
