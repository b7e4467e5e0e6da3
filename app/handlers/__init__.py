"""Handlers package."""
from app.handlers.review_handler import ReviewHandler, InvalidRequestError
from app.handlers.places_handler import PlacesHandler, PlacesNotConfiguredError

__all__ = [
    "ReviewHandler",
    "InvalidRequestError",
    "PlacesHandler",
    "PlacesNotConfiguredError",
]
