"""Normalization of raw Hostaway review records into canonical Reviews.

Every field has exactly one documented default. Malformed input degrades
field by field and never aborts a record or a batch.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import pytz

from app.models.review import (
    GUEST_TO_HOST,
    MAX_RATING,
    MIN_RATING,
    UNKNOWN,
    UNKNOWN_GUEST,
    UNKNOWN_PROPERTY,
    Review,
    ReviewCategory,
)

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a rating
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _in_scale(value: Any) -> bool:
    return _is_number(value) and MIN_RATING <= value <= MAX_RATING


def _string_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _normalize_id(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _normalize_categories(value: Any) -> list[ReviewCategory]:
    """Coerce reviewCategory into a list of ReviewCategory entries.

    Non-list values become []; non-mapping entries are dropped; a non-string
    name or a rating outside 0-10 becomes None on that entry.
    """
    if not isinstance(value, list):
        return []

    categories: list[ReviewCategory] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("category")
        rating = entry.get("rating")
        categories.append(
            ReviewCategory(
                category=name if isinstance(name, str) else None,
                rating=float(rating) if _in_scale(rating) else None,
            )
        )
    return categories


def derive_rating(categories: list[ReviewCategory], fallback: Any) -> Optional[float]:
    """Overall rating for a review.

    Mean of the named, numeric category ratings rounded to 2 decimals; otherwise the
    raw overall rating when numeric and on the 0-10 scale; otherwise None.
    """
    ratings = [entry.rating for entry in categories if entry.is_valid()]
    if ratings:
        return round(sum(ratings) / len(ratings), 2)
    if _in_scale(fallback):
        return float(fallback)
    return None


def normalize_review(raw: Mapping[str, Any], approvals: Mapping[int, bool]) -> Review:
    """Convert one raw record into a canonical Review.

    Args:
        raw: Raw review record with unknown/partial keys
        approvals: Approval map keyed by review id

    Returns:
        Review with defaults filled in for every missing or malformed field
    """
    review_id = _normalize_id(raw.get("id"))
    categories = _normalize_categories(raw.get("reviewCategory"))

    return Review(
        id=review_id,
        type=_string_or(raw.get("type"), UNKNOWN),
        status=_string_or(raw.get("status"), UNKNOWN),
        rating=derive_rating(categories, raw.get("rating")),
        public_review=_string_or(raw.get("publicReview"), ""),
        review_category=categories,
        submitted_at=_string_or(raw.get("submittedAt"), ""),
        guest_name=_string_or(raw.get("guestName"), UNKNOWN_GUEST),
        listing_name=_string_or(raw.get("listingName"), UNKNOWN_PROPERTY),
        display_on_website=bool(approvals.get(review_id, False)) if review_id is not None else False,
    )


def normalize_reviews(
    raw_records: Iterable[Any], approvals: Mapping[int, bool]
) -> list[Review]:
    """Normalize a batch, keeping only guest-authored reviews in source order."""
    reviews: list[Review] = []
    skipped = 0
    for raw in raw_records:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        if raw.get("type") != GUEST_TO_HOST:
            skipped += 1
            continue
        reviews.append(normalize_review(raw, approvals))

    logger.debug(
        f"[ReviewNormalizer] Normalized {len(reviews)} reviews, skipped {skipped}"
    )
    return reviews


def parse_submitted_at(value: str) -> Optional[datetime]:
    """Parse a submittedAt string into an aware UTC datetime.

    Accepts ISO-8601 and Hostaway's "YYYY-MM-DD HH:MM:SS". Naive values are
    taken as UTC. Returns None when the value is empty or unparseable.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            return pytz.UTC.localize(parsed)
        # Offsets near datetime.min/max overflow on conversion
        return parsed.astimezone(pytz.UTC)
    except (ValueError, OverflowError):
        return None
