"""Review collection service: fetch, normalize, snapshot and derived views."""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import httpx
import pytz

from app.api.hostaway_client import HostawayAPIClient, HostawayAPIError
from app.dao.approval_dao import ApprovalDAO
from app.metrics import (
    APPROVAL_UPDATES_TOTAL,
    REVIEW_FETCHES_TOTAL,
    REVIEWS_IN_SNAPSHOT,
)
from app.models import (
    AccessToken,
    AnalyticsSummary,
    FilterOptions,
    PropertyReviewsResponse,
    Review,
    ReviewFilter,
    SortKey,
    ALL,
    DEFAULT_SORT,
)
from app.services.analytics_service import compute_analytics
from app.services.category_detector import default_category_ranges, detect_categories
from app.services.review_filter import filter_reviews
from app.services.review_normalizer import normalize_reviews
from app.services.review_sorter import sort_reviews

logger = logging.getLogger(__name__)

SOURCE_REAL_API = "real_api"
SOURCE_MOCK_DATA = "mock_data"

# Max memoized management views per snapshot
VIEW_CACHE_SIZE = 64


class ReviewNotFoundError(Exception):
    """No review with the given id exists in the current snapshot."""


@dataclass(frozen=True)
class ReviewSnapshot:
    """Immutable normalized review collection.

    Replaced wholesale on every refetch or approval change.
    """
    reviews: tuple[Review, ...]
    source: str
    version: int
    fetched_at: datetime = field(default_factory=lambda: datetime.now(pytz.UTC))


class ReviewService:
    """Owns the current review snapshot and the views derived from it.

    Filtering, sorting and analytics are recomputed from the snapshot; the
    only writer is set_approval, which swaps in a patched copy once the
    approval store has confirmed the write.
    """

    def __init__(
        self,
        hostaway_api: HostawayAPIClient,
        approval_dao: ApprovalDAO,
        mock_reviews_path: Path,
    ):
        """Initialize review service.

        Args:
            hostaway_api: Hostaway API client (primary source)
            approval_dao: Approval store
            mock_reviews_path: Fixture dataset used when Hostaway has no data
        """
        self.hostaway_api = hostaway_api
        self.approval_dao = approval_dao
        self.mock_reviews_path = Path(mock_reviews_path)

        self.credential: Optional[AccessToken] = None
        self._snapshot: Optional[ReviewSnapshot] = None
        self._view_cache: dict[tuple[int, str, str], list[Review]] = {}

    # ------------------------------------------------------------------
    # Snapshot lifecycle
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Optional[ReviewSnapshot]:
        return self._snapshot

    def _replace_snapshot(self, reviews: list[Review], source: str) -> ReviewSnapshot:
        version = self._snapshot.version + 1 if self._snapshot else 1
        self._snapshot = ReviewSnapshot(reviews=tuple(reviews), source=source, version=version)
        self._view_cache = {}
        REVIEWS_IN_SNAPSHOT.set(len(reviews))
        return self._snapshot

    async def _fetch_from_hostaway(self) -> list[dict[str, Any]]:
        """Raw records from Hostaway, or [] when it has nothing for us."""
        if not self.hostaway_api.is_configured:
            logger.info("[ReviewService] Hostaway credentials not configured")
            return []

        try:
            raw, self.credential = await self.hostaway_api.fetch_reviews(self.credential)
            return raw
        except (HostawayAPIError, httpx.HTTPError) as e:
            logger.warning(f"[ReviewService] Hostaway API unavailable: {e}")
            return []

    def load_mock_reviews(self) -> list[dict[str, Any]]:
        """Raw records from the fixture file ({"status", "result"} shape)."""
        try:
            with open(self.mock_reviews_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[ReviewService] Error reading mock reviews {self.mock_reviews_path}: {e}")
            return []

        result = data.get("result") if isinstance(data, dict) else None
        return result if isinstance(result, list) else []

    async def refresh(self) -> ReviewSnapshot:
        """Rebuild the snapshot from Hostaway, falling back to the fixture."""
        raw = await self._fetch_from_hostaway()
        source = SOURCE_REAL_API
        if not raw:
            logger.warning("[ReviewService] No reviews from Hostaway, using mock data")
            raw = self.load_mock_reviews()
            source = SOURCE_MOCK_DATA

        approvals = self.approval_dao.get()
        reviews = normalize_reviews(raw, approvals)

        REVIEW_FETCHES_TOTAL.labels(source=source).inc()
        snapshot = self._replace_snapshot(reviews, source)
        logger.info(
            f"[ReviewService] Processed {len(reviews)} normalized reviews from {source} "
            f"(snapshot v{snapshot.version})"
        )
        return snapshot

    async def ensure_snapshot(self) -> ReviewSnapshot:
        """Current snapshot, fetching one first if none exists yet."""
        if self._snapshot is None:
            return await self.refresh()
        return self._snapshot

    async def get_reviews(self) -> list[Review]:
        snapshot = await self.ensure_snapshot()
        return list(snapshot.reviews)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    async def get_categories(self) -> list[str]:
        snapshot = await self.ensure_snapshot()
        return detect_categories(snapshot.reviews)

    async def get_category_ranges(self) -> dict[str, tuple[float, float]]:
        return default_category_ranges(await self.get_categories())

    async def get_filter_options(self) -> FilterOptions:
        snapshot = await self.ensure_snapshot()
        return FilterOptions(
            properties=self._unique_properties(snapshot.reviews),
            categories=detect_categories(snapshot.reviews),
        )

    async def list_properties(self) -> list[str]:
        snapshot = await self.ensure_snapshot()
        return self._unique_properties(snapshot.reviews)

    @staticmethod
    def _unique_properties(reviews: tuple[Review, ...]) -> list[str]:
        # First-seen order
        return list(dict.fromkeys(review.listing_name for review in reviews))

    async def get_management_view(
        self, spec: ReviewFilter, sort_key: SortKey = DEFAULT_SORT
    ) -> list[Review]:
        """Filtered and sorted reviews, memoized per snapshot version."""
        snapshot = await self.ensure_snapshot()
        cache_key = (snapshot.version, spec.cache_key(), sort_key.cache_key())
        cached = self._view_cache.get(cache_key)
        if cached is not None:
            return list(cached)

        # Ranges only apply to categories present in the collection
        vocabulary = set(detect_categories(snapshot.reviews))
        scoped = spec.model_copy(update={
            "category_ranges": {
                name: bounds
                for name, bounds in spec.category_ranges.items()
                if name in vocabulary
            },
        })

        view = sort_reviews(filter_reviews(snapshot.reviews, scoped), sort_key)

        if len(self._view_cache) >= VIEW_CACHE_SIZE:
            self._view_cache.pop(next(iter(self._view_cache)))
        self._view_cache[cache_key] = view
        return list(view)

    async def get_analytics(self, property: str = ALL) -> Optional[AnalyticsSummary]:
        snapshot = await self.ensure_snapshot()
        return compute_analytics(snapshot.reviews, property)

    async def get_property_reviews(self, listing_name: str) -> PropertyReviewsResponse:
        """Approved reviews for the public property page, newest first."""
        approved = await self.get_management_view(
            ReviewFilter(property=listing_name, display_status="shown"),
            DEFAULT_SORT,
        )
        ratings = [r.rating for r in approved if r.rating is not None]
        return PropertyReviewsResponse(
            listing_name=listing_name,
            total_reviews=len(approved),
            average_rating=round(sum(ratings) / len(ratings), 2) if ratings else None,
            reviews=approved,
        )

    # ------------------------------------------------------------------
    # Approval toggle
    # ------------------------------------------------------------------

    async def set_approval(self, review_id: int, display_on_website: bool) -> Review:
        """Persist an approval, then patch the snapshot.

        The snapshot only changes after the store confirms the write; if the
        write fails the exception propagates and the snapshot is untouched.

        Raises:
            ReviewNotFoundError: If review_id is not in the snapshot
        """
        snapshot = await self.ensure_snapshot()
        if not any(review.id == review_id for review in snapshot.reviews):
            APPROVAL_UPDATES_TOTAL.labels(status="not_found").inc()
            raise ReviewNotFoundError(f"Review {review_id} not found")

        try:
            self.approval_dao.set(review_id, display_on_website)
        except Exception as e:
            APPROVAL_UPDATES_TOTAL.labels(status="error").inc()
            logger.error(f"[ReviewService] Failed to update approval for review {review_id}: {e}")
            raise

        patched = [
            review.model_copy(update={"display_on_website": display_on_website})
            if review.id == review_id else review
            for review in snapshot.reviews
        ]
        self._replace_snapshot(patched, snapshot.source)
        APPROVAL_UPDATES_TOTAL.labels(status="success").inc()

        return next(review for review in patched if review.id == review_id)
