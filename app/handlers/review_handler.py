"""Review handler for HTTP requests."""
import logging
import math
from typing import Any, Optional

from app.models import (
    AnalyticsResponse,
    ApprovalUpdate,
    FilterOptions,
    PropertyReviewsResponse,
    ReviewFilter,
    ReviewsResponse,
    SortDirection,
    SortKey,
    SortKind,
    ALL,
    DEFAULT_SORT,
)
from app.services import ReviewService

logger = logging.getLogger(__name__)


class InvalidRequestError(ValueError):
    """Request parameters could not be turned into a filter, sort or update."""


def parse_category_range(value: str) -> tuple[str, tuple[float, float]]:
    """Parse "name:min:max" into (name, (min, max)).

    Splits from the right so category names may contain ":".

    Raises:
        InvalidRequestError: If the value is malformed
    """
    rest, _, high = value.rpartition(":")
    name, _, low = rest.rpartition(":")
    if not name:
        raise InvalidRequestError(f"category_range must be name:min:max, got {value!r}")
    try:
        bounds = (float(low), float(high))
    except ValueError:
        raise InvalidRequestError(f"category_range bounds must be numbers, got {value!r}") from None
    if not all(math.isfinite(bound) for bound in bounds):
        raise InvalidRequestError(f"category_range bounds must be finite, got {value!r}")
    return name, bounds


def build_sort_key(
    sort: Optional[str] = None,
    sort_kind: Optional[str] = None,
    sort_direction: Optional[str] = None,
    sort_category: Optional[str] = None,
) -> SortKey:
    """SortKey from either the tagged parameters or the legacy "name-dir" form.

    The tagged parameters win when both are supplied.

    Raises:
        InvalidRequestError: If the parameters do not describe a valid key
    """
    try:
        if sort_kind or sort_direction or sort_category:
            kind = SortKind(sort_kind) if sort_kind else (
                SortKind.CATEGORY if sort_category else DEFAULT_SORT.kind
            )
            direction = SortDirection(sort_direction) if sort_direction else DEFAULT_SORT.direction
            return SortKey(kind=kind, direction=direction, category=sort_category)
        if sort:
            return SortKey.parse(sort)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return DEFAULT_SORT


class ReviewHandler:
    """Handler for review-related HTTP requests."""

    def __init__(self, review_service: ReviewService):
        """Initialize review handler.

        Args:
            review_service: Service owning the review snapshot
        """
        self.review_service = review_service

    def ping(self) -> dict[str, str]:
        """Health check endpoint.

        Returns:
            {"status": "pong"}
        """
        logger.debug("[ReviewHandler] Ping")
        return {"status": "pong"}

    async def get_hostaway_reviews(self) -> ReviewsResponse:
        """Refetch from the upstream source and return the full collection."""
        logger.info("[ReviewHandler] Starting Hostaway reviews fetch")
        snapshot = await self.review_service.refresh()
        return ReviewsResponse(result=list(snapshot.reviews))

    async def get_reviews(
        self,
        property: str = ALL,
        channel: str = ALL,
        display_status: str = "all",
        search: str = "",
        category_ranges: Optional[list[str]] = None,
        sort: Optional[str] = None,
        sort_kind: Optional[str] = None,
        sort_direction: Optional[str] = None,
        sort_category: Optional[str] = None,
    ) -> ReviewsResponse:
        """Management view: filtered and sorted reviews.

        Raises:
            InvalidRequestError: On malformed filter or sort parameters
        """
        ranges = dict(parse_category_range(value) for value in category_ranges or [])
        try:
            spec = ReviewFilter(
                property=property,
                channel=channel,
                display_status=display_status,
                search_text=search,
                category_ranges=ranges,
            )
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e
        sort_key = build_sort_key(sort, sort_kind, sort_direction, sort_category)

        logger.info(
            f"[ReviewHandler] GetReviews: property={property!r}, channel={channel!r}, "
            f"display_status={display_status}, search={search!r}, "
            f"ranges={len(ranges)}, sort={sort_key.cache_key()}"
        )

        reviews = await self.review_service.get_management_view(spec, sort_key)
        logger.info(f"[ReviewHandler] Returning {len(reviews)} reviews")
        return ReviewsResponse(result=reviews)

    async def get_categories(self) -> dict[str, Any]:
        ranges = await self.review_service.get_category_ranges()
        return {
            "categories": list(ranges),
            "ranges": {name: list(bounds) for name, bounds in ranges.items()},
        }

    async def get_filter_options(self) -> FilterOptions:
        return await self.review_service.get_filter_options()

    async def update_approval(self, review_id: int, body: Any) -> ApprovalUpdate:
        """Toggle public display for one review.

        Raises:
            InvalidRequestError: If displayOnWebsite is missing or not a boolean
            ReviewNotFoundError: If the review does not exist
        """
        value = body.get("displayOnWebsite") if isinstance(body, dict) else None
        if not isinstance(value, bool):
            raise InvalidRequestError("displayOnWebsite must be a boolean value.")

        await self.review_service.set_approval(review_id, value)
        logger.info(f"[ReviewHandler] Review {review_id} displayOnWebsite={value}")
        return ApprovalUpdate(
            message="Review approval status updated successfully.",
            display_on_website=value,
        )

    async def get_analytics(self, property: str = ALL) -> AnalyticsResponse:
        summary = await self.review_service.get_analytics(property)
        return AnalyticsResponse(
            status="success" if summary is not None else "no_data",
            property=property,
            analytics=summary,
        )

    async def list_properties(self) -> dict[str, list[str]]:
        return {"properties": await self.review_service.list_properties()}

    async def get_property_reviews(self, listing_name: str) -> PropertyReviewsResponse:
        return await self.review_service.get_property_reviews(listing_name)
