"""Google Places models (legacy Places Web Service JSON shapes)."""
from typing import Any, Optional

from pydantic import BaseModel, Field


class PlaceReview(BaseModel):
    """A single user review from Google Places."""
    author_name: Optional[str] = None
    rating: Optional[int] = None
    text: str = ""
    time: Optional[int] = None  # Unix seconds
    relative_time_description: Optional[str] = None
    author_url: Optional[str] = None
    profile_photo_url: Optional[str] = None
    language: Optional[str] = None


class PlaceSearchResult(BaseModel):
    """One text-search hit."""
    place_id: str
    name: Optional[str] = None
    formatted_address: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: int = 0
    types: list[str] = Field(default_factory=list)
    geometry: Optional[dict[str, Any]] = None
    price_level: Optional[int] = None


class PlaceDetails(BaseModel):
    """Place details including up to five reviews."""
    place_id: Optional[str] = None
    name: Optional[str] = None
    formatted_address: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: int = 0
    reviews: list[PlaceReview] = Field(default_factory=list)
    formatted_phone_number: Optional[str] = None
    website: Optional[str] = None
    opening_hours: Optional[dict[str, Any]] = None
    photos: list[dict[str, Any]] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    geometry: Optional[dict[str, Any]] = None


class PlaceReviews(BaseModel):
    """Review-only view of a place."""
    place_id: Optional[str] = None
    place_name: Optional[str] = None
    overall_rating: Optional[float] = None
    total_ratings: int = 0
    reviews: list[PlaceReview] = Field(default_factory=list)
    source: str = "google_places"


class AutocompleteResponse(BaseModel):
    status: str = "success"
    predictions: list[dict[str, Any]] = Field(default_factory=list)


class PlaceSearchResponse(BaseModel):
    status: str = "success"
    results: list[PlaceSearchResult] = Field(default_factory=list)
    total_results: int = 0


class PlaceDetailsResponse(BaseModel):
    status: str = "success"
    result: PlaceDetails


class PlaceReviewsResponse(BaseModel):
    status: str = "success"
    data: PlaceReviews
