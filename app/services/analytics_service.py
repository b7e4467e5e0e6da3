"""Dashboard analytics over a review collection."""
import logging
import re
from datetime import datetime
from typing import Iterable, Optional

import pytz

from app.models.analytics import (
    AnalyticsSummary,
    CategoryChartPoint,
    MonthlyRating,
    PropertyRating,
    RatingBucket,
)
from app.models.review import MAX_RATING, Review
from app.models.review_filter import ALL
from app.services.category_detector import detect_categories
from app.services.review_normalizer import parse_submitted_at

logger = logging.getLogger(__name__)

# Category entries at or below this count as low ratings for a property
LOW_RATING_THRESHOLD = 6

# Overall-rating buckets as (label, inclusive lower bound), checked in order.
# Ratings below 1 or above 10 fall into none of them.
RATING_BUCKETS = [
    ("Excellent (9-10)", 9),
    ("Good (7-8)", 7),
    ("Average (5-6)", 5),
    ("Poor (1-4)", 1),
]
BUCKET_MIN = 1
BUCKET_MAX = MAX_RATING


def humanize_category(name: str) -> str:
    """Display name for a category: check_in -> Check In."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name.replace("_", " "))


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def rating_bucket(rating: Optional[float]) -> Optional[str]:
    """Label of the pie bucket a rating falls in, or None."""
    if rating is None or rating < BUCKET_MIN or rating > BUCKET_MAX:
        return None
    for label, lower in RATING_BUCKETS:
        if rating >= lower:
            return label
    return None


def category_chart_data(reviews: list[Review], categories: list[str]) -> list[CategoryChartPoint]:
    totals: dict[str, list[float]] = {category: [] for category in categories}
    for review in reviews:
        for entry in review.valid_categories():
            if entry.category in totals:
                totals[entry.category].append(entry.rating)

    return [
        CategoryChartPoint(subject=humanize_category(category), value=_mean(values))
        for category, values in totals.items()
    ]


def rating_pie_data(reviews: list[Review]) -> list[RatingBucket]:
    counts = {label: 0 for label, _ in RATING_BUCKETS}
    for review in reviews:
        label = rating_bucket(review.rating)
        if label is not None:
            counts[label] += 1
    return [
        RatingBucket(name=label, value=count)
        for label, count in counts.items()
        if count > 0
    ]


def properties_by_rating(reviews: list[Review]) -> list[PropertyRating]:
    """Per-listing rollup sorted by average rating, best first.

    averageRating sums the ratings and divides by every review of the
    property, so unrated reviews count as 0.
    """
    grouped: dict[str, list[Review]] = {}
    for review in reviews:
        grouped.setdefault(review.listing_name, []).append(review)

    rollups = []
    for name, items in grouped.items():
        total_rating = sum(r.rating for r in items if r.rating is not None)
        low_ratings = sum(
            1
            for r in items
            for entry in r.valid_categories()
            if entry.rating <= LOW_RATING_THRESHOLD
        )
        rollups.append(
            PropertyRating(
                name=name,
                total_reviews=len(items),
                average_rating=total_rating / len(items),
                low_ratings=low_ratings,
            )
        )

    rollups.sort(key=lambda p: p.average_rating, reverse=True)
    return rollups


def rating_over_time(reviews: list[Review]) -> list[MonthlyRating]:
    """Mean overall rating per calendar month (UTC), oldest first."""
    months: dict[str, list[float]] = {}
    for review in reviews:
        if review.rating is None:
            continue
        submitted = parse_submitted_at(review.submitted_at)
        if submitted is None:
            continue
        months.setdefault(f"{submitted.year:04d}-{submitted.month:02d}", []).append(review.rating)

    series = []
    for month in sorted(months):
        year, month_num = (int(part) for part in month.split("-"))
        series.append(
            MonthlyRating(
                month=month,
                date=datetime(year, month_num, 1, tzinfo=pytz.UTC),
                average_rating=_mean(months[month]),
                review_count=len(months[month]),
            )
        )
    return series


def compute_analytics(
    reviews: Iterable[Review], property: str = ALL
) -> Optional[AnalyticsSummary]:
    """Summary statistics for the dashboard.

    Property selection is the only filter honored here.

    Args:
        reviews: Canonical review collection
        property: Listing name, or "all"

    Returns:
        AnalyticsSummary, or None when no reviews match ("no data")
    """
    items = [
        r for r in reviews
        if property == ALL or r.listing_name == property
    ]
    if not items:
        logger.info(f"[AnalyticsService] No reviews for property={property!r}")
        return None

    # Two passes: build the category vocabulary, then aggregate against it
    categories = detect_categories(items)
    rated = [r.rating for r in items if r.rating is not None]

    summary = AnalyticsSummary(
        total_reviews=len(items),
        overall_average=_mean(rated),
        unique_properties_count=len({r.listing_name for r in items}),
        category_chart_data=category_chart_data(items, categories),
        rating_pie_data=rating_pie_data(items),
        properties_by_rating=properties_by_rating(items),
        rating_over_time_data=rating_over_time(items),
    )
    logger.debug(
        f"[AnalyticsService] {summary.total_reviews} reviews, "
        f"{len(categories)} categories, {summary.unique_properties_count} properties"
    )
    return summary
