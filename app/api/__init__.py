"""External API clients package."""
from app.api.hostaway_client import HostawayAPIClient, HostawayAPIError
from app.api.google_places_client import GooglePlacesAPIClient, GooglePlacesAPIError

__all__ = [
    "HostawayAPIClient",
    "HostawayAPIError",
    "GooglePlacesAPIClient",
    "GooglePlacesAPIError",
]
