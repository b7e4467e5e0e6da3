"""Analytics summary models for the dashboard view."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryChartPoint(_CamelModel):
    """One radar-chart axis: humanized category name and its mean rating."""
    subject: str
    value: float
    full_mark: float = 10.0


class RatingBucket(_CamelModel):
    """One slice of the overall-rating pie."""
    name: str
    value: int


class PropertyRating(_CamelModel):
    """Per-property rollup, ordered by average rating."""
    name: str
    total_reviews: int = 0
    average_rating: float = 0.0
    low_ratings: int = 0  # Category entries rated <= 6


class MonthlyRating(_CamelModel):
    """Mean overall rating for one calendar month (UTC)."""
    month: str  # YYYY-MM
    date: datetime  # First day of the month, UTC
    average_rating: float
    review_count: int = 0


class AnalyticsSummary(_CamelModel):
    """Summary statistics over a (possibly property-filtered) collection."""
    total_reviews: int
    overall_average: float
    unique_properties_count: int
    category_chart_data: list[CategoryChartPoint] = Field(default_factory=list)
    rating_pie_data: list[RatingBucket] = Field(default_factory=list)
    properties_by_rating: list[PropertyRating] = Field(default_factory=list)
    rating_over_time_data: list[MonthlyRating] = Field(default_factory=list)


class AnalyticsResponse(_CamelModel):
    """Response for GET /api/analytics.

    status is "no_data" (and analytics None) when nothing matched, so the
    dashboard can render an empty state distinct from an all-zero dataset.
    """
    status: str
    property: str
    analytics: Optional[AnalyticsSummary] = None
