"""Google Places handler for HTTP requests."""
import logging
from typing import Optional

from app.api.google_places_client import GooglePlacesAPIClient
from app.models import (
    AutocompleteResponse,
    PlaceDetailsResponse,
    PlaceReviewsResponse,
    PlaceSearchResponse,
)

logger = logging.getLogger(__name__)


class PlacesNotConfiguredError(Exception):
    """No Google API key was configured, so there is no client."""


class PlacesHandler:
    """Handler for the Google Places proxy endpoints.

    Places search is independent of the Hostaway review pipeline; it only
    shares the HTTP surface.
    """

    def __init__(self, google_places_api: Optional[GooglePlacesAPIClient]):
        """Initialize places handler.

        Args:
            google_places_api: Client, or None when no API key is configured
        """
        self.google_places_api = google_places_api

    def _client(self) -> GooglePlacesAPIClient:
        if self.google_places_api is None:
            logger.error("[PlacesHandler] Google API key is not configured on the server")
            raise PlacesNotConfiguredError("Google API key not configured")
        return self.google_places_api

    async def autocomplete(self, input_text: str, types: Optional[str] = None) -> AutocompleteResponse:
        predictions = await self._client().autocomplete(input_text, types)
        return AutocompleteResponse(predictions=predictions)

    async def search(
        self,
        query: str,
        location: Optional[str] = None,
        radius: Optional[int] = None,
    ) -> PlaceSearchResponse:
        results = await self._client().text_search(query, location, radius)
        return PlaceSearchResponse(results=results, total_results=len(results))

    async def get_details(self, place_id: str, fields: Optional[str] = None) -> PlaceDetailsResponse:
        details = await self._client().get_place_details(place_id, fields)
        logger.info(
            f"[PlacesHandler] Retrieved details for place {details.name!r} "
            f"with {len(details.reviews)} reviews"
        )
        return PlaceDetailsResponse(result=details)

    async def get_reviews(self, place_id: str) -> PlaceReviewsResponse:
        reviews = await self._client().get_place_reviews(place_id)
        return PlaceReviewsResponse(data=reviews)
