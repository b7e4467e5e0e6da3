"""Data models package for flex-reviews-server."""
from app.models.review import (
    Review,
    ReviewCategory,
    ReviewsResponse,
    ApprovalUpdate,
    PropertyReviewsResponse,
    GUEST_TO_HOST,
    UNKNOWN,
    UNKNOWN_GUEST,
    UNKNOWN_PROPERTY,
)
from app.models.review_filter import (
    ReviewFilter,
    SortKey,
    SortKind,
    SortDirection,
    DisplayStatus,
    FilterOptions,
    ALL,
    HOSTAWAY_CHANNEL,
    KNOWN_CHANNELS,
    FULL_RANGE,
    DEFAULT_SORT,
)
from app.models.analytics import (
    AnalyticsSummary,
    AnalyticsResponse,
    CategoryChartPoint,
    RatingBucket,
    PropertyRating,
    MonthlyRating,
)
from app.models.credentials import AccessToken
from app.models.places import (
    PlaceReview,
    PlaceSearchResult,
    PlaceDetails,
    PlaceReviews,
    AutocompleteResponse,
    PlaceSearchResponse,
    PlaceDetailsResponse,
    PlaceReviewsResponse,
)

__all__ = [
    # Review models
    "Review",
    "ReviewCategory",
    "ReviewsResponse",
    "ApprovalUpdate",
    "PropertyReviewsResponse",
    "GUEST_TO_HOST",
    "UNKNOWN",
    "UNKNOWN_GUEST",
    "UNKNOWN_PROPERTY",
    # Filter / sort models
    "ReviewFilter",
    "SortKey",
    "SortKind",
    "SortDirection",
    "DisplayStatus",
    "FilterOptions",
    "ALL",
    "HOSTAWAY_CHANNEL",
    "KNOWN_CHANNELS",
    "FULL_RANGE",
    "DEFAULT_SORT",
    # Analytics models
    "AnalyticsSummary",
    "AnalyticsResponse",
    "CategoryChartPoint",
    "RatingBucket",
    "PropertyRating",
    "MonthlyRating",
    # Credentials
    "AccessToken",
    # Google Places models
    "PlaceReview",
    "PlaceSearchResult",
    "PlaceDetails",
    "PlaceReviews",
    "AutocompleteResponse",
    "PlaceSearchResponse",
    "PlaceDetailsResponse",
    "PlaceReviewsResponse",
]
