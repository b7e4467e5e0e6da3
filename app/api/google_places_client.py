"""Google Places Web Service client for place search and guest reviews."""
import logging
import time
from typing import Any, Optional

import httpx

from app.models.places import (
    PlaceDetails,
    PlaceReview,
    PlaceReviews,
    PlaceSearchResult,
)
from app.metrics import (
    GOOGLE_PLACES_API_CALLS_TOTAL,
    GOOGLE_PLACES_API_CALL_DURATION_SECONDS,
    GOOGLE_PLACES_API_ERRORS_TOTAL,
)

logger = logging.getLogger(__name__)

GOOGLE_PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"

# Default details fields: reviews plus basic info
DETAILS_FIELDS = ",".join([
    "place_id",
    "name",
    "formatted_address",
    "rating",
    "user_ratings_total",
    "reviews",
    "formatted_phone_number",
    "website",
    "opening_hours",
    "photos",
    "types",
    "geometry",
])

# Review-only fields keep the per-call cost down
REVIEW_FIELDS = "place_id,name,rating,user_ratings_total,reviews"


class GooglePlacesAPIError(Exception):
    """Google answered with a non-OK status.

    Attributes:
        status: Google's status string (e.g. "INVALID_REQUEST"), or None for
            transport-level failures
        message: Google's error_message, or the transport error text
    """

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.message = message


class GooglePlacesAPIClient:
    """Async HTTP client for the Google Places Web Service.

    Covers autocomplete, text search, place details and place reviews. Every
    call raises GooglePlacesAPIError when Google reports a non-OK status.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = GOOGLE_PLACES_API_BASE,
        timeout: float = 15.0,
    ):
        """Initialize Google Places API client.

        Args:
            api_key: Google Maps/Places API key
            base_url: Places Web Service base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    async def close(self):
        """Close the HTTP client and clean up resources."""
        await self.client.aclose()

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any],
        accepted_statuses: tuple[str, ...] = ("OK",),
    ) -> dict:
        """GET {base}/{endpoint}/json and check Google's status field.

        Raises:
            GooglePlacesAPIError: On a non-accepted status or transport failure
        """
        url = f"{self.base_url}/{endpoint}/json"
        query = {**params, "key": self.api_key}

        logger.debug(f"[GooglePlacesAPIClient] GET {endpoint} params={params}")

        start_time = time.perf_counter()

        try:
            response = await self.client.get(url, params=query)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self._record_error(endpoint, start_time, "http_error")
            logger.error(f"[GooglePlacesAPIClient] HTTP error on {endpoint}: {e}")
            raise GooglePlacesAPIError(str(e)) from e
        except httpx.TimeoutException as e:
            self._record_error(endpoint, start_time, "timeout")
            logger.error(f"[GooglePlacesAPIClient] Timeout on {endpoint}: {e}")
            raise GooglePlacesAPIError(str(e)) from e
        except httpx.RequestError as e:
            self._record_error(endpoint, start_time, "connection_error")
            logger.error(f"[GooglePlacesAPIClient] Request error on {endpoint}: {e}")
            raise GooglePlacesAPIError(str(e)) from e
        except ValueError as e:
            self._record_error(endpoint, start_time, "bad_response")
            logger.error(f"[GooglePlacesAPIClient] Invalid JSON from {endpoint}: {e}")
            raise GooglePlacesAPIError(str(e)) from e

        status = data.get("status")
        if status not in accepted_statuses:
            self._record_error(endpoint, start_time, "api_status")
            message = data.get("error_message") or status or "Unknown error"
            logger.error(f"[GooglePlacesAPIClient] {endpoint} returned {status}: {message}")
            raise GooglePlacesAPIError(message, status=status)

        duration = time.perf_counter() - start_time
        GOOGLE_PLACES_API_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(duration)
        GOOGLE_PLACES_API_CALLS_TOTAL.labels(endpoint=endpoint, status="success").inc()
        return data

    def _record_error(self, endpoint: str, start_time: float, error_type: str) -> None:
        duration = time.perf_counter() - start_time
        GOOGLE_PLACES_API_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(duration)
        GOOGLE_PLACES_API_CALLS_TOTAL.labels(endpoint=endpoint, status="error").inc()
        GOOGLE_PLACES_API_ERRORS_TOTAL.labels(endpoint=endpoint, error_type=error_type).inc()

    async def autocomplete(self, input_text: str, types: Optional[str] = None) -> list[dict]:
        """Autocomplete predictions for a partial search string.

        ZERO_RESULTS is a valid (empty) answer here.
        """
        data = await self._get(
            "autocomplete",
            {"input": input_text, "types": types or "establishment"},
            accepted_statuses=("OK", "ZERO_RESULTS"),
        )
        return data.get("predictions", [])

    async def text_search(
        self,
        query: str,
        location: Optional[str] = None,
        radius: Optional[int] = None,
    ) -> list[PlaceSearchResult]:
        """Text search, optionally biased to "lat,lng" within radius meters."""
        params: dict[str, Any] = {"query": query}
        if location:
            params["location"] = location
        if radius:
            params["radius"] = radius

        data = await self._get("textsearch", params)
        results = [
            self._parse_search_result(place)
            for place in data.get("results", [])
            if place.get("place_id")
        ]
        logger.info(f"[GooglePlacesAPIClient] Found {len(results)} places for query: {query!r}")
        return results

    async def get_place_details(self, place_id: str, fields: Optional[str] = None) -> PlaceDetails:
        """Details for a place, including up to five reviews."""
        data = await self._get(
            "details",
            {"place_id": place_id, "fields": fields or DETAILS_FIELDS},
        )
        place = data.get("result") or {}
        return PlaceDetails(
            place_id=place.get("place_id"),
            name=place.get("name"),
            formatted_address=place.get("formatted_address"),
            rating=place.get("rating") or None,
            user_ratings_total=place.get("user_ratings_total") or 0,
            reviews=[self._parse_review(r) for r in place.get("reviews") or []],
            formatted_phone_number=place.get("formatted_phone_number") or None,
            website=place.get("website") or None,
            opening_hours=place.get("opening_hours") or None,
            photos=place.get("photos") or [],
            types=place.get("types") or [],
            geometry=place.get("geometry"),
        )

    async def get_place_reviews(self, place_id: str) -> PlaceReviews:
        """Review-only details for a place."""
        data = await self._get("details", {"place_id": place_id, "fields": REVIEW_FIELDS})
        place = data.get("result") or {}
        reviews = PlaceReviews(
            place_id=place.get("place_id"),
            place_name=place.get("name"),
            overall_rating=place.get("rating") or None,
            total_ratings=place.get("user_ratings_total") or 0,
            reviews=[self._parse_review(r) for r in place.get("reviews") or []],
        )
        logger.info(
            f"[GooglePlacesAPIClient] Retrieved {len(reviews.reviews)} Google reviews "
            f"for: {reviews.place_name!r}"
        )
        return reviews

    def _parse_search_result(self, place: dict) -> PlaceSearchResult:
        return PlaceSearchResult(
            place_id=place["place_id"],
            name=place.get("name"),
            formatted_address=place.get("formatted_address"),
            rating=place.get("rating") or None,
            user_ratings_total=place.get("user_ratings_total") or 0,
            types=place.get("types") or [],
            geometry=place.get("geometry"),
            price_level=place.get("price_level") or None,
        )

    def _parse_review(self, review: dict) -> PlaceReview:
        return PlaceReview(
            author_name=review.get("author_name"),
            rating=review.get("rating"),
            text=review.get("text") or "",
            time=review.get("time"),
            relative_time_description=review.get("relative_time_description"),
            author_url=review.get("author_url") or None,
            profile_photo_url=review.get("profile_photo_url") or None,
            language=review.get("language") or None,
        )
