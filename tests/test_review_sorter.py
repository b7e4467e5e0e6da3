"""Unit tests for review sorting and sort key parsing."""
import pytest
from pydantic import ValidationError

from app.models import Review, ReviewCategory, SortDirection, SortKey, SortKind
from app.services.review_sorter import sort_reviews


def make_review(review_id, submitted_at="", rating=None, categories=None):
    return Review(
        id=review_id,
        submitted_at=submitted_at,
        rating=rating,
        review_category=[
            ReviewCategory(category=name, rating=value)
            for name, value in (categories or {}).items()
        ],
    )


def ids(reviews):
    return [r.id for r in reviews]


class TestSortKeyParse:
    """Tests for the legacy "name-direction" sort form."""

    def test_date_and_rating(self):
        assert SortKey.parse("date-desc") == SortKey(kind=SortKind.DATE, direction=SortDirection.DESC)
        assert SortKey.parse("rating-asc") == SortKey(kind=SortKind.RATING, direction=SortDirection.ASC)

    def test_category(self):
        key = SortKey.parse("cleanliness-asc")

        assert key.kind == SortKind.CATEGORY
        assert key.category == "cleanliness"
        assert key.descending is False

    def test_category_name_with_hyphen(self):
        """Test that only the last "-" separates the direction."""
        key = SortKey.parse("check-in-desc")

        assert key.category == "check-in"
        assert key.descending is True

    @pytest.mark.parametrize("value", ["date", "date-up", "-desc", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            SortKey.parse(value)

    def test_category_kind_requires_category(self):
        with pytest.raises(ValidationError):
            SortKey(kind=SortKind.CATEGORY)

    def test_cache_key_ignores_category_for_date(self):
        a = SortKey(kind=SortKind.DATE, category="cleanliness")
        b = SortKey(kind=SortKind.DATE)
        assert a.cache_key() == b.cache_key()


class TestSortByDate:
    """Tests for date ordering."""

    def test_newest_first(self):
        reviews = [
            make_review(1, "2024-01-10 10:00:00"),
            make_review(2, "2024-03-01 10:00:00"),
            make_review(3, "2023-12-31 23:59:59"),
        ]

        result = sort_reviews(reviews, SortKey.parse("date-desc"))

        assert ids(result) == [2, 1, 3]

    def test_oldest_first(self):
        reviews = [
            make_review(1, "2024-01-10 10:00:00"),
            make_review(2, "2024-03-01 10:00:00"),
        ]
        assert ids(sort_reviews(reviews, SortKey.parse("date-asc"))) == [1, 2]

    def test_invalid_dates_sort_as_epoch(self):
        """Test that unparseable dates go last when newest first, first when oldest first."""
        reviews = [
            make_review(1, "not a date"),
            make_review(2, "2024-03-01 10:00:00"),
            make_review(3, ""),
            make_review(4, "2020-01-01 00:00:00"),
        ]

        assert ids(sort_reviews(reviews, SortKey.parse("date-desc"))) == [2, 4, 1, 3]
        assert ids(sort_reviews(reviews, SortKey.parse("date-asc"))) == [1, 3, 4, 2]

    def test_overflowing_offset_sorts_as_epoch(self):
        """Test that a date at the datetime limits does not break the sort."""
        reviews = [
            make_review(1, "0001-01-01T00:00:00+01:00"),
            make_review(2, "2024-03-01 10:00:00"),
        ]

        assert ids(sort_reviews(reviews, SortKey.parse("date-desc"))) == [2, 1]
        assert ids(sort_reviews(reviews, SortKey.parse("date-asc"))) == [1, 2]


class TestSortEmpty:
    """Tests for sorting an empty collection."""

    @pytest.mark.parametrize("value", ["date-desc", "date-asc", "rating-desc", "cleanliness-asc"])
    def test_empty_collection(self, value):
        assert sort_reviews([], SortKey.parse(value)) == []


class TestSortByRating:
    """Tests for overall rating ordering."""

    def test_none_counts_as_zero(self):
        reviews = [
            make_review(1, rating=7.5),
            make_review(2, rating=None),
            make_review(3, rating=9.0),
            make_review(4, rating=0.0),
        ]

        assert ids(sort_reviews(reviews, SortKey.parse("rating-desc"))) == [3, 1, 2, 4]
        assert ids(sort_reviews(reviews, SortKey.parse("rating-asc"))) == [2, 4, 1, 3]


class TestSortByCategory:
    """Tests for category ordering."""

    @pytest.fixture
    def reviews(self):
        return [
            make_review(1, categories={"cleanliness": 8}),
            make_review(2, categories={"communication": 10}),
            make_review(3, categories={"cleanliness": 10}),
            make_review(4),
            make_review(5, categories={"cleanliness": 6}),
        ]

    def test_descending_missing_last(self, reviews):
        result = sort_reviews(reviews, SortKey.parse("cleanliness-desc"))
        assert ids(result) == [3, 1, 5, 2, 4]

    def test_ascending_missing_last(self, reviews):
        result = sort_reviews(reviews, SortKey.parse("cleanliness-asc"))
        assert ids(result) == [5, 1, 3, 2, 4]

    def test_is_a_permutation(self, reviews):
        result = sort_reviews(reviews, SortKey.parse("value-desc"))

        assert sorted(ids(result)) == [1, 2, 3, 4, 5]
        # Nobody has the category, so the original order survives
        assert ids(result) == [1, 2, 3, 4, 5]

    def test_does_not_mutate_input(self, reviews):
        before = ids(reviews)
        sort_reviews(reviews, SortKey.parse("cleanliness-desc"))
        assert ids(reviews) == before
