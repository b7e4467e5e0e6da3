"""FastAPI routes for the Google Places proxy."""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query

from app.api import GooglePlacesAPIError
from app.handlers import PlacesNotConfiguredError
from app.models import (
    AutocompleteResponse,
    PlaceDetailsResponse,
    PlaceReviewsResponse,
    PlaceSearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/google-places")

# Global handler reference - set during startup
_places_handler = None


def set_places_handler(handler):
    """Set the places handler instance (called during startup)."""
    global _places_handler
    _places_handler = handler
    logger.info("[PlacesRouter] Handler injected successfully")


def get_handler():
    """Get the places handler, raising error if not initialized."""
    if _places_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _places_handler


def _api_error(e: GooglePlacesAPIError, label: str, status_code: int) -> HTTPException:
    """Map a Google error: API status errors use status_code, transport errors 500."""
    if e.status is None:
        return HTTPException(status_code=500, detail=f"Failed to call {label}: {e.message}")
    return HTTPException(
        status_code=status_code,
        detail={"message": f"{label} error", "status": e.status, "error": e.message},
    )


@router.get(
    "/autocomplete",
    response_model=AutocompleteResponse,
    summary="Place autocomplete",
    description="Autocomplete suggestions for place searches",
)
async def autocomplete(
    input: str = Query("", description="Partial search string"),
    types: Optional[str] = Query(None, description="Place type, defaults to establishment"),
) -> AutocompleteResponse:
    if not input:
        raise HTTPException(status_code=400, detail="Input query parameter is required")
    try:
        handler = get_handler()
        return await handler.autocomplete(input, types)
    except HTTPException:
        raise
    except PlacesNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except GooglePlacesAPIError as e:
        raise _api_error(e, "Google Places Autocomplete API", 500)
    except Exception as e:
        logger.error(f"[PlacesRouter] Error in autocomplete: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/search",
    response_model=PlaceSearchResponse,
    summary="Search places",
    description="Text search for places (property name, address, ...)",
)
async def search(
    query: str = Query("", description="Text query"),
    location: Optional[str] = Query(None, description="Location bias as lat,lng"),
    radius: Optional[int] = Query(None, description="Search radius in meters", gt=0),
) -> PlaceSearchResponse:
    if not query:
        raise HTTPException(status_code=400, detail="Query parameter is required")
    try:
        handler = get_handler()
        return await handler.search(query, location, radius)
    except HTTPException:
        raise
    except PlacesNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except GooglePlacesAPIError as e:
        raise _api_error(e, "Google Places API", 400)
    except Exception as e:
        logger.error(f"[PlacesRouter] Error in search: {e}")
        raise HTTPException(status_code=500, detail="Failed to search Google Places")


@router.get(
    "/details/{place_id}",
    response_model=PlaceDetailsResponse,
    summary="Place details",
)
async def get_details(
    place_id: str = Path(..., description="Google Place ID"),
    fields: Optional[str] = Query(None, description="Comma-separated field list"),
) -> PlaceDetailsResponse:
    try:
        handler = get_handler()
        return await handler.get_details(place_id, fields)
    except HTTPException:
        raise
    except PlacesNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except GooglePlacesAPIError as e:
        raise _api_error(e, "Google Place Details API", 400)
    except Exception as e:
        logger.error(f"[PlacesRouter] Error in get_details: {e}")
        raise HTTPException(status_code=500, detail="Failed to get place details")


@router.get(
    "/reviews/{place_id}",
    response_model=PlaceReviewsResponse,
    summary="Google reviews for a place",
)
async def get_reviews(
    place_id: str = Path(..., description="Google Place ID"),
) -> PlaceReviewsResponse:
    try:
        handler = get_handler()
        return await handler.get_reviews(place_id)
    except HTTPException:
        raise
    except PlacesNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except GooglePlacesAPIError as e:
        raise _api_error(e, "Google Place Reviews API", 400)
    except Exception as e:
        logger.error(f"[PlacesRouter] Error in get_reviews: {e}")
        raise HTTPException(status_code=500, detail="Failed to get Google reviews")
