"""Review data models using Pydantic.

Python attributes are snake_case; the wire format is the camelCase shape the
dashboard and the public property page depend on (see Review).
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Placeholder values used when a raw record lacks a field
UNKNOWN_GUEST = "Unknown Guest"
UNKNOWN_PROPERTY = "Unknown Property"
UNKNOWN = "unknown"

# Only guest-authored reviews make it into the collection
GUEST_TO_HOST = "guest-to-host"

# Rating scale shared by overall and category ratings
MIN_RATING = 0.0
MAX_RATING = 10.0


class ReviewCategory(BaseModel):
    """A named sub-score (e.g. cleanliness) attached to a review.

    Either field may be None when the source entry was malformed. Such
    entries are kept so the original sequence survives, but averages,
    filters and sorts ignore them.
    """
    category: Optional[str] = None
    rating: Optional[float] = None

    def is_valid(self) -> bool:
        """True when both the name and the rating are usable."""
        return self.category is not None and self.rating is not None


class Review(BaseModel):
    """Canonical normalized guest review.

    Wire shape:
    {
        "id": 7453, "type": "guest-to-host", "status": "published",
        "rating": 9.33, "publicReview": "...",
        "reviewCategory": [{"category": "cleanliness", "rating": 10}],
        "submittedAt": "2020-08-21 22:45:14", "guestName": "Shane Finkelstein",
        "listingName": "2B N1 A - 29 Shoreditch Heights", "displayOnWebsite": false
    }
    """
    id: Optional[int] = None
    type: str = UNKNOWN
    status: str = UNKNOWN
    rating: Optional[float] = None
    public_review: str = ""
    review_category: list[ReviewCategory] = Field(default_factory=list)
    submitted_at: str = ""
    guest_name: str = UNKNOWN_GUEST
    listing_name: str = UNKNOWN_PROPERTY
    display_on_website: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def category_rating(self, category: str) -> Optional[float]:
        """Rating for the first valid entry named ``category``, or None."""
        for entry in self.review_category:
            if entry.is_valid() and entry.category == category:
                return entry.rating
        return None

    def valid_categories(self) -> list[ReviewCategory]:
        """Category entries with both a name and a numeric rating."""
        return [entry for entry in self.review_category if entry.is_valid()]


class ReviewsResponse(BaseModel):
    """Response envelope for GET /api/reviews/hostaway (Hostaway format)."""
    status: str = "success"
    result: list[Review] = Field(default_factory=list)


class ApprovalUpdate(BaseModel):
    """Response for PUT /api/reviews/{id}/approval."""
    message: str
    display_on_website: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PropertyReviewsResponse(BaseModel):
    """Approved reviews for the public property page."""
    listing_name: str
    total_reviews: int = 0
    average_rating: Optional[float] = None
    reviews: list[Review] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
