"""Unit tests for raw Hostaway record normalization."""
from datetime import datetime

import pytest
import pytz

from app.models import UNKNOWN, UNKNOWN_GUEST, UNKNOWN_PROPERTY
from app.services.review_normalizer import (
    derive_rating,
    normalize_review,
    normalize_reviews,
    parse_submitted_at,
)


@pytest.fixture
def raw_review():
    """A well-formed Hostaway review record."""
    return {
        "id": 7453,
        "type": "guest-to-host",
        "status": "published",
        "rating": None,
        "publicReview": "Shane and family are wonderful! Would definitely host again :)",
        "reviewCategory": [
            {"category": "cleanliness", "rating": 10},
            {"category": "communication", "rating": 9},
            {"category": "respect_house_rules", "rating": 8},
        ],
        "submittedAt": "2020-08-21 22:45:14",
        "guestName": "Shane Finkelstein",
        "listingName": "2B N1 A - 29 Shoreditch Heights",
    }


class TestNormalizeReview:
    """Tests for normalize_review."""

    def test_well_formed_record(self, raw_review):
        """Test that all fields are carried over and rating is the category mean."""
        review = normalize_review(raw_review, {})

        assert review.id == 7453
        assert review.type == "guest-to-host"
        assert review.status == "published"
        assert review.rating == 9.0
        assert review.public_review.startswith("Shane and family")
        assert len(review.review_category) == 3
        assert review.submitted_at == "2020-08-21 22:45:14"
        assert review.guest_name == "Shane Finkelstein"
        assert review.listing_name == "2B N1 A - 29 Shoreditch Heights"
        assert review.display_on_website is False

    def test_category_mean_rounded_to_two_decimals(self, raw_review):
        """Test that [10, 9, 9] averages to 9.33."""
        raw_review["reviewCategory"] = [
            {"category": "cleanliness", "rating": 10},
            {"category": "communication", "rating": 9},
            {"category": "value", "rating": 9},
        ]

        review = normalize_review(raw_review, {})

        assert review.rating == 9.33

    def test_approval_is_applied(self, raw_review):
        """Test that displayOnWebsite comes from the approval map."""
        assert normalize_review(raw_review, {7453: True}).display_on_website is True
        assert normalize_review(raw_review, {7453: False}).display_on_website is False
        assert normalize_review(raw_review, {1: True}).display_on_website is False

    def test_empty_record_gets_defaults(self):
        """Test that every field falls back to its default."""
        review = normalize_review({}, {})

        assert review.id is None
        assert review.type == UNKNOWN
        assert review.status == UNKNOWN
        assert review.rating is None
        assert review.public_review == ""
        assert review.review_category == []
        assert review.submitted_at == ""
        assert review.guest_name == UNKNOWN_GUEST
        assert review.listing_name == UNKNOWN_PROPERTY
        assert review.display_on_website is False

    def test_null_names_get_defaults(self, raw_review):
        """Test null guest and listing names."""
        raw_review["guestName"] = None
        raw_review["listingName"] = None

        review = normalize_review(raw_review, {})

        assert review.guest_name == UNKNOWN_GUEST
        assert review.listing_name == UNKNOWN_PROPERTY

    def test_string_id_is_coerced(self, raw_review):
        """Test that a digit-only string id becomes an int."""
        raw_review["id"] = "7453"
        assert normalize_review(raw_review, {7453: True}).id == 7453

    def test_invalid_id_becomes_none(self, raw_review):
        """Test that non-numeric ids are dropped and never approved."""
        raw_review["id"] = "abc"

        review = normalize_review(raw_review, {7453: True})

        assert review.id is None
        assert review.display_on_website is False

    def test_non_list_categories(self, raw_review):
        """Test that a non-list reviewCategory becomes [] and rating falls back."""
        raw_review["reviewCategory"] = "cleanliness=10"
        raw_review["rating"] = 8

        review = normalize_review(raw_review, {})

        assert review.review_category == []
        assert review.rating == 8.0

    def test_malformed_category_entries(self, raw_review):
        """Test that bad names and ratings become None without dropping entries."""
        raw_review["reviewCategory"] = [
            {"category": "cleanliness", "rating": "ten"},
            {"category": 42, "rating": 7},
            {"category": "value", "rating": 14},
            {"category": "communication", "rating": 8},
            "not-a-dict",
        ]

        review = normalize_review(raw_review, {})

        assert len(review.review_category) == 4
        assert review.review_category[0].rating is None
        assert review.review_category[1].category is None
        assert review.review_category[1].rating == 7.0
        assert review.review_category[2].rating is None
        # Only the named, numeric entry counts
        assert review.rating == 8.0

    def test_raw_rating_fallback_only_when_in_scale(self, raw_review):
        """Test the overall rating fallback when no category ratings exist."""
        raw_review["reviewCategory"] = []

        raw_review["rating"] = 0
        assert normalize_review(raw_review, {}).rating == 0.0

        raw_review["rating"] = 11
        assert normalize_review(raw_review, {}).rating is None

        raw_review["rating"] = "9"
        assert normalize_review(raw_review, {}).rating is None

        raw_review["rating"] = True
        assert normalize_review(raw_review, {}).rating is None


class TestDeriveRating:
    """Tests for derive_rating."""

    def test_no_categories_no_fallback(self):
        assert derive_rating([], None) is None

    def test_unnamed_entries_are_ignored(self, raw_review):
        """Test that an entry with a non-string name does not move the average."""
        raw_review["reviewCategory"] = [
            {"category": 42, "rating": 2},
            {"category": "cleanliness", "rating": 10},
        ]

        assert normalize_review(raw_review, {}).rating == 10.0

    def test_only_unnamed_entries_use_fallback(self, raw_review):
        raw_review["reviewCategory"] = [{"category": None, "rating": 3}]
        raw_review["rating"] = 9

        assert normalize_review(raw_review, {}).rating == 9.0


class TestNormalizeReviews:
    """Tests for batch normalization."""

    def test_keeps_only_guest_to_host_in_order(self, raw_review):
        """Test type filtering and source order."""
        host_review = {**raw_review, "id": 2, "type": "host-to-guest"}
        second = {**raw_review, "id": 3}

        reviews = normalize_reviews([raw_review, host_review, second], {})

        assert [r.id for r in reviews] == [7453, 3]

    def test_skips_non_mapping_records(self, raw_review):
        """Test that garbage records do not abort the batch."""
        reviews = normalize_reviews([None, "x", 5, raw_review], {})

        assert len(reviews) == 1

    def test_empty_batch(self):
        assert normalize_reviews([], {}) == []


class TestParseSubmittedAt:
    """Tests for submittedAt parsing."""

    def test_hostaway_format(self):
        parsed = parse_submitted_at("2020-08-21 22:45:14")
        assert parsed == datetime(2020, 8, 21, 22, 45, 14, tzinfo=pytz.UTC)

    def test_iso_with_z(self):
        parsed = parse_submitted_at("2024-01-31T23:30:00Z")
        assert parsed == datetime(2024, 1, 31, 23, 30, tzinfo=pytz.UTC)

    def test_offset_is_converted_to_utc(self):
        parsed = parse_submitted_at("2024-02-01T01:30:00+02:00")
        assert parsed == datetime(2024, 1, 31, 23, 30, tzinfo=pytz.UTC)

    @pytest.mark.parametrize("value", ["", "yesterday", "2024-13-45", None])
    def test_unparseable_returns_none(self, value):
        assert parse_submitted_at(value) is None

    @pytest.mark.parametrize(
        "value",
        ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"],
    )
    def test_out_of_range_offset_returns_none(self, value):
        """Test that a valid ISO string that overflows on UTC conversion is unparseable."""
        assert parse_submitted_at(value) is None
