"""Ordering of reviews for the management view."""
import logging
from datetime import datetime
from typing import Iterable

import pytz

from app.models.review import Review
from app.models.review_filter import SortKey, SortKind
from app.services.review_normalizer import parse_submitted_at

logger = logging.getLogger(__name__)

# Unparseable submittedAt values sort as if submitted at the Unix epoch:
# last for newest-first, first for oldest-first.
EPOCH = datetime(1970, 1, 1, tzinfo=pytz.UTC)


def submitted_timestamp(review: Review) -> float:
    """POSIX timestamp of submittedAt, or 0.0 (epoch) when unparseable."""
    parsed = parse_submitted_at(review.submitted_at)
    return (parsed or EPOCH).timestamp()


def sort_reviews(reviews: Iterable[Review], key: SortKey) -> list[Review]:
    """Return a new, stably sorted list.

    - date: by submittedAt, invalid dates compare as the epoch
    - rating: by overall rating, None treated as 0
    - category: by that category's rating; reviews missing the category go
      last in both directions and keep their relative order
    """
    items = list(reviews)

    if key.kind == SortKind.DATE:
        return sorted(items, key=submitted_timestamp, reverse=key.descending)

    if key.kind == SortKind.RATING:
        return sorted(items, key=lambda r: r.rating or 0.0, reverse=key.descending)

    present = [r for r in items if r.category_rating(key.category) is not None]
    missing = [r for r in items if r.category_rating(key.category) is None]
    ordered = sorted(
        present,
        key=lambda r: r.category_rating(key.category),
        reverse=key.descending,
    )
    logger.debug(
        f"[ReviewSorter] Category sort on {key.category!r}: "
        f"{len(ordered)} rated, {len(missing)} missing"
    )
    return ordered + missing
