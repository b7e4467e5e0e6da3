"""Routers package."""
from app.routers.review_router import router as review_router, set_review_handler
from app.routers.places_router import router as places_router, set_places_handler

__all__ = ["review_router", "set_review_handler", "places_router", "set_places_handler"]
