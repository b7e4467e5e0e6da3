"""Dependency injection container for application components."""
import logging

import redis

from app.config import APPROVAL_BACKEND_REDIS, Settings
from app.api import GooglePlacesAPIClient, HostawayAPIClient
from app.dao import JsonFileApprovalDAO, RedisApprovalDAO
from app.handlers import PlacesHandler, ReviewHandler
from app.services import ReviewService

logger = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Initializes and wires up all application dependencies.
    """

    def __init__(self, settings: Settings):
        """Initialize container with all dependencies.

        Args:
            settings: Application settings
        """
        logger.info("[Container] Initializing container")
        self.settings = settings

        # Initialize Hostaway API client
        self.hostaway_api = HostawayAPIClient(
            account_id=settings.hostaway_account_id,
            api_key=settings.hostaway_api_key,
            base_url=settings.hostaway_base_url,
            timeout=settings.hostaway_timeout_seconds,
            reviews_limit=settings.hostaway_reviews_limit,
        )
        if not self.hostaway_api.is_configured:
            logger.warning(
                "[Container] Hostaway credentials not configured. "
                "Reviews will be served from the mock dataset."
            )

        # Initialize approval store
        self.redis_client = None
        if settings.approval_store_backend == APPROVAL_BACKEND_REDIS:
            logger.info(f"[Container] Connecting to Redis at {settings.redis_address}")
            self.redis_client = redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                password=settings.redis_password or None,
                db=settings.redis_db,
                decode_responses=True,
            )

            # Test Redis connection
            try:
                self.redis_client.ping()
                logger.info("[Container] Redis connection successful")
            except Exception as e:
                logger.error(f"[Container] Failed to connect to Redis: {e}")
                raise

            self.approval_dao = RedisApprovalDAO(self.redis_client)
        else:
            self.approval_dao = JsonFileApprovalDAO(settings.approvals_path)
            logger.info(f"[Container] Using approvals file {settings.approvals_path}")

        # Initialize Google Places API client (optional)
        self.google_places_api = None
        if settings.google_api_key:
            self.google_places_api = GooglePlacesAPIClient(
                api_key=settings.google_api_key,
                base_url=settings.google_places_base_url,
            )
            logger.info("[Container] Google Places API client initialized")
        else:
            logger.warning(
                "[Container] Google API key not configured. "
                "Google Places endpoints will report a configuration error."
            )

        # Initialize services
        self.review_service = ReviewService(
            self.hostaway_api,
            self.approval_dao,
            mock_reviews_path=settings.mock_reviews_path,
        )

        # Initialize handlers
        self.review_handler = ReviewHandler(self.review_service)
        self.places_handler = PlacesHandler(self.google_places_api)

        logger.info("[Container] Container initialized successfully")

    async def shutdown(self):
        """Clean up resources on shutdown."""
        logger.info("[Container] Shutting down container")
        try:
            await self.hostaway_api.close()
            logger.info("[Container] Hostaway API client closed")
        except Exception as e:
            logger.error(f"[Container] Error closing Hostaway API client: {e}")

        if self.google_places_api:
            try:
                await self.google_places_api.close()
                logger.info("[Container] Google Places API client closed")
            except Exception as e:
                logger.error(f"[Container] Error closing Google Places API client: {e}")

        if self.redis_client:
            try:
                self.redis_client.close()
                logger.info("[Container] Redis client closed")
            except Exception as e:
                logger.error(f"[Container] Error closing Redis client: {e}")
