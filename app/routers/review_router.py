"""FastAPI routes for review, analytics and property endpoints."""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Path, Query

from app.handlers import InvalidRequestError
from app.models import (
    AnalyticsResponse,
    ApprovalUpdate,
    FilterOptions,
    PropertyReviewsResponse,
    ReviewsResponse,
)
from app.services import ReviewNotFoundError

logger = logging.getLogger(__name__)

# Create router at module level
router = APIRouter()

# Global handler reference - set during startup
_review_handler = None


def set_review_handler(handler):
    """Set the review handler instance (called during startup)."""
    global _review_handler
    _review_handler = handler
    logger.info("[ReviewRouter] Handler injected successfully")


def get_handler():
    """Get the review handler, raising error if not initialized."""
    if _review_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _review_handler


@router.get(
    "/api/reviews/hostaway",
    response_model=ReviewsResponse,
    summary="Get and normalize Hostaway reviews",
    description="Refetch guest reviews from Hostaway (or the fixture dataset) and return them normalized",
)
async def get_hostaway_reviews() -> ReviewsResponse:
    try:
        handler = get_handler()
        return await handler.get_hostaway_reviews()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_hostaway_reviews: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve reviews.")


@router.get(
    "/api/reviews",
    response_model=ReviewsResponse,
    summary="Filtered and sorted reviews",
    description="Management view over the current review snapshot",
)
async def get_reviews(
    property: str = Query("all", description="Listing name, or 'all'"),
    channel: str = Query("all", description="Review channel, or 'all'"),
    display_status: str = Query("all", description="all | shown | hidden"),
    search: str = Query("", description="Case-insensitive text search"),
    category_range: Optional[list[str]] = Query(
        None,
        description="Repeatable category bound as name:min:max",
    ),
    sort: Optional[str] = Query(None, description="Legacy sort key, e.g. 'cleanliness-desc'"),
    sort_kind: Optional[str] = Query(None, description="date | rating | category"),
    sort_direction: Optional[str] = Query(None, description="asc | desc"),
    sort_category: Optional[str] = Query(None, description="Category name for category sorts"),
) -> ReviewsResponse:
    try:
        handler = get_handler()
        return await handler.get_reviews(
            property=property,
            channel=channel,
            display_status=display_status,
            search=search,
            category_ranges=category_range,
            sort=sort,
            sort_kind=sort_kind,
            sort_direction=sort_direction,
            sort_category=sort_category,
        )
    except HTTPException:
        raise
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_reviews: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/api/reviews/categories",
    summary="Detected rating categories",
    description="Sorted category vocabulary with unrestricted 0-10 ranges",
)
async def get_categories() -> dict[str, Any]:
    try:
        handler = get_handler()
        return await handler.get_categories()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_categories: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/api/reviews/filters",
    response_model=FilterOptions,
    summary="Filter control options",
)
async def get_filter_options() -> FilterOptions:
    try:
        handler = get_handler()
        return await handler.get_filter_options()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_filter_options: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put(
    "/api/reviews/{review_id}/approval",
    response_model=ApprovalUpdate,
    summary="Update review approval status",
    description="Set whether a review is displayed on the public website",
)
async def update_approval(
    review_id: int = Path(..., description="Review ID"),
    body: Any = Body(None),
) -> ApprovalUpdate:
    try:
        handler = get_handler()
        return await handler.update_approval(review_id, body)
    except HTTPException:
        raise
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"[ReviewRouter] Error updating review approval: {e}")
        raise HTTPException(status_code=500, detail="Failed to update review approval status.")


@router.get(
    "/api/analytics",
    response_model=AnalyticsResponse,
    summary="Review analytics",
    description="Distributions, per-property rollups and monthly trend",
)
async def get_analytics(
    property: str = Query("all", description="Listing name, or 'all'"),
) -> AnalyticsResponse:
    try:
        handler = get_handler()
        return await handler.get_analytics(property)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_analytics: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/api/properties",
    summary="Known properties",
)
async def list_properties() -> dict[str, list[str]]:
    try:
        handler = get_handler()
        return await handler.list_properties()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in list_properties: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/api/properties/{listing_name}/reviews",
    response_model=PropertyReviewsResponse,
    summary="Approved reviews for a property",
    description="Reviews shown on the public property page, newest first",
)
async def get_property_reviews(
    listing_name: str = Path(..., description="Listing name"),
) -> PropertyReviewsResponse:
    try:
        handler = get_handler()
        return await handler.get_property_reviews(listing_name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[ReviewRouter] Error in get_property_reviews: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/ping",
    summary="Health check",
    description="Health check endpoint",
)
def ping() -> dict[str, str]:
    """Health check endpoint."""
    handler = get_handler()
    return handler.ping()
