"""Unit tests for HTTP handlers (mocked services and clients)."""
from unittest.mock import AsyncMock, Mock

import pytest

from app.handlers import (
    InvalidRequestError,
    PlacesHandler,
    PlacesNotConfiguredError,
    ReviewHandler,
)
from app.handlers.review_handler import build_sort_key, parse_category_range
from app.models import (
    AnalyticsSummary,
    PlaceReviews,
    PlaceSearchResult,
    Review,
    ReviewFilter,
    SortDirection,
    SortKind,
    DEFAULT_SORT,
)
from app.services import ReviewNotFoundError, ReviewSnapshot


class TestParseCategoryRange:
    """Tests for the name:min:max query format."""

    def test_valid(self):
        assert parse_category_range("cleanliness:8:10") == ("cleanliness", (8.0, 10.0))

    def test_name_with_colon(self):
        assert parse_category_range("a:b:1.5:9") == ("a:b", (1.5, 9.0))

    @pytest.mark.parametrize(
        "value",
        [
            "cleanliness",
            "cleanliness:8",
            ":1:2",
            "clean:x:10",
            "cleanliness:nan:10",
            "cleanliness:0:inf",
            "cleanliness:-inf:10",
        ],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidRequestError):
            parse_category_range(value)


class TestBuildSortKey:
    """Tests for sort parameter handling."""

    def test_default(self):
        assert build_sort_key() == DEFAULT_SORT

    def test_legacy(self):
        key = build_sort_key(sort="cleanliness-asc")

        assert key.kind == SortKind.CATEGORY
        assert key.category == "cleanliness"

    def test_tagged_wins_over_legacy(self):
        key = build_sort_key(sort="date-asc", sort_kind="rating", sort_direction="desc")

        assert key.kind == SortKind.RATING
        assert key.direction == SortDirection.DESC

    def test_category_alone_implies_category_kind(self):
        key = build_sort_key(sort_category="value")

        assert key.kind == SortKind.CATEGORY
        assert key.direction == SortDirection.DESC

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"sort": "date-sideways"},
            {"sort_kind": "popularity"},
            {"sort_kind": "category"},
            {"sort_direction": "up"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidRequestError):
            build_sort_key(**kwargs)


class TestReviewHandler:
    """Unit tests for ReviewHandler."""

    @pytest.fixture
    def review_service(self):
        return Mock()

    @pytest.fixture
    def handler(self, review_service):
        return ReviewHandler(review_service)

    def test_ping(self, handler):
        assert handler.ping() == {"status": "pong"}

    @pytest.mark.asyncio
    async def test_get_hostaway_reviews_refreshes(self, handler, review_service):
        review_service.refresh = AsyncMock(
            return_value=ReviewSnapshot(reviews=(Review(id=1),), source="mock_data", version=1)
        )

        response = await handler.get_hostaway_reviews()

        assert response.status == "success"
        assert [r.id for r in response.result] == [1]

    @pytest.mark.asyncio
    async def test_get_reviews_builds_filter_and_sort(self, handler, review_service):
        review_service.get_management_view = AsyncMock(return_value=[Review(id=2)])

        response = await handler.get_reviews(
            property="Loft",
            display_status="shown",
            search="clean",
            category_ranges=["cleanliness:8:10"],
            sort="rating-asc",
        )

        assert [r.id for r in response.result] == [2]
        spec, sort_key = review_service.get_management_view.await_args.args
        assert spec == ReviewFilter(
            property="Loft",
            display_status="shown",
            search_text="clean",
            category_ranges={"cleanliness": (8.0, 10.0)},
        )
        assert sort_key.kind == SortKind.RATING

    @pytest.mark.asyncio
    async def test_get_reviews_invalid_display_status(self, handler):
        with pytest.raises(InvalidRequestError):
            await handler.get_reviews(display_status="visible")

    @pytest.mark.asyncio
    async def test_get_categories(self, handler, review_service):
        review_service.get_category_ranges = AsyncMock(
            return_value={"cleanliness": (0.0, 10.0), "value": (0.0, 10.0)}
        )

        result = await handler.get_categories()

        assert result == {
            "categories": ["cleanliness", "value"],
            "ranges": {"cleanliness": [0.0, 10.0], "value": [0.0, 10.0]},
        }

    @pytest.mark.asyncio
    async def test_update_approval(self, handler, review_service):
        review_service.set_approval = AsyncMock(return_value=Review(id=7, display_on_website=True))

        result = await handler.update_approval(7, {"displayOnWebsite": True})

        review_service.set_approval.assert_awaited_once_with(7, True)
        assert result.display_on_website is True
        assert result.message == "Review approval status updated successfully."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, {}, {"displayOnWebsite": "true"}, {"displayOnWebsite": 1}, [True]])
    async def test_update_approval_requires_boolean(self, handler, review_service, body):
        review_service.set_approval = AsyncMock()

        with pytest.raises(InvalidRequestError):
            await handler.update_approval(7, body)

        review_service.set_approval.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_approval_not_found_propagates(self, handler, review_service):
        review_service.set_approval = AsyncMock(side_effect=ReviewNotFoundError("Review 7 not found"))

        with pytest.raises(ReviewNotFoundError):
            await handler.update_approval(7, {"displayOnWebsite": False})

    @pytest.mark.asyncio
    async def test_get_analytics(self, handler, review_service):
        summary = AnalyticsSummary(total_reviews=1, overall_average=9.0, unique_properties_count=1)
        review_service.get_analytics = AsyncMock(return_value=summary)

        response = await handler.get_analytics("Loft")

        assert response.status == "success"
        assert response.property == "Loft"
        assert response.analytics is summary

    @pytest.mark.asyncio
    async def test_get_analytics_no_data(self, handler, review_service):
        review_service.get_analytics = AsyncMock(return_value=None)

        response = await handler.get_analytics()

        assert response.status == "no_data"
        assert response.property == "all"
        assert response.analytics is None

    @pytest.mark.asyncio
    async def test_list_properties(self, handler, review_service):
        review_service.list_properties = AsyncMock(return_value=["A", "B"])

        assert await handler.list_properties() == {"properties": ["A", "B"]}


class TestPlacesHandler:
    """Unit tests for PlacesHandler."""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        handler = PlacesHandler(None)

        with pytest.raises(PlacesNotConfiguredError):
            await handler.autocomplete("flex")

    @pytest.mark.asyncio
    async def test_search(self):
        client = Mock()
        client.text_search = AsyncMock(return_value=[PlaceSearchResult(place_id="p1")])
        handler = PlacesHandler(client)

        response = await handler.search("flex", "51.5,-0.1", 1000)

        client.text_search.assert_awaited_once_with("flex", "51.5,-0.1", 1000)
        assert response.total_results == 1
        assert response.results[0].place_id == "p1"

    @pytest.mark.asyncio
    async def test_get_reviews(self):
        client = Mock()
        client.get_place_reviews = AsyncMock(return_value=PlaceReviews(place_id="p1"))
        handler = PlacesHandler(client)

        response = await handler.get_reviews("p1")

        assert response.status == "success"
        assert response.data.place_id == "p1"
