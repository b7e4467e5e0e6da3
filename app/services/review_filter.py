"""Compound filtering of a review collection for the management view.

Each predicate is independent and side-effect free, so the order in which
they are applied never changes the result and filtering is idempotent.
"""
import logging
from typing import Callable, Iterable

from app.models.review import Review
from app.models.review_filter import (
    ALL,
    FULL_RANGE,
    HOSTAWAY_CHANNEL,
    DisplayStatus,
    ReviewFilter,
)

logger = logging.getLogger(__name__)

ReviewPredicate = Callable[[Review], bool]


def _property_predicate(listing_name: str) -> ReviewPredicate:
    return lambda review: review.listing_name == listing_name


def _channel_predicate(channel: str) -> ReviewPredicate:
    # Every review comes from Hostaway, so the channel decides for all of them
    matches = channel == HOSTAWAY_CHANNEL
    return lambda review: matches


def _display_predicate(status: DisplayStatus) -> ReviewPredicate:
    wanted = status == DisplayStatus.SHOWN
    return lambda review: review.display_on_website is wanted


def _search_predicate(query: str) -> ReviewPredicate:
    needle = query.lower()

    def matches(review: Review) -> bool:
        return (
            needle in review.public_review.lower()
            or needle in review.guest_name.lower()
            or needle in review.listing_name.lower()
        )

    return matches


def in_category_range(review: Review, category: str, low: float, high: float) -> bool:
    """Range check for one category with pass-through for missing data.

    A review without the category is never penalized.
    """
    if (low, high) == FULL_RANGE:
        return True
    rating = review.category_rating(category)
    if rating is None:
        return True
    return low <= rating <= high


def _category_predicate(ranges: dict[str, tuple[float, float]]) -> ReviewPredicate:
    def matches(review: Review) -> bool:
        return all(
            in_category_range(review, category, low, high)
            for category, (low, high) in ranges.items()
        )

    return matches


def build_predicates(spec: ReviewFilter) -> list[ReviewPredicate]:
    """Predicates for the active parts of a filter spec."""
    predicates: list[ReviewPredicate] = []

    if spec.property != ALL:
        predicates.append(_property_predicate(spec.property))
    if spec.channel != ALL:
        predicates.append(_channel_predicate(spec.channel))
    if spec.display_status != DisplayStatus.ALL:
        predicates.append(_display_predicate(spec.display_status))
    if spec.search_text.strip():
        predicates.append(_search_predicate(spec.search_text))

    active_ranges = {
        category: bounds
        for category, bounds in spec.category_ranges.items()
        if tuple(bounds) != FULL_RANGE
    }
    if active_ranges:
        predicates.append(_category_predicate(active_ranges))

    return predicates


def filter_reviews(reviews: Iterable[Review], spec: ReviewFilter) -> list[Review]:
    """Reviews matching every active filter, in their original order."""
    predicates = build_predicates(spec)
    result = [
        review for review in reviews
        if all(predicate(review) for predicate in predicates)
    ]
    logger.debug(
        f"[ReviewFilter] {len(predicates)} active filters, {len(result)} reviews kept"
    )
    return result
