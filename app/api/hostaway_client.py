"""Hostaway API client with OAuth2 client-credentials auth."""
import logging
import time
from datetime import datetime
from typing import Any, Optional

import httpx

from app.metrics import (
    HOSTAWAY_API_CALLS_TOTAL,
    HOSTAWAY_API_CALL_DURATION_SECONDS,
    HOSTAWAY_API_ERRORS_TOTAL,
)
from app.models import AccessToken

logger = logging.getLogger(__name__)

HOSTAWAY_API_BASE = "https://api.hostaway.com/v1"

# Resources Hostaway should embed in each review record
REVIEW_INCLUDE_RESOURCES = "listing,conversation,reservation"


class HostawayAPIError(Exception):
    """Raised when Hostaway rejects a request or returns an unusable body."""


class HostawayAPIClient:
    """Async HTTP client for the Hostaway public API.

    The access token is never stored on the client: callers hold an
    AccessToken and pass it into fetch_reviews, which hands back the token it
    actually used (refreshed if the given one had expired).
    """

    def __init__(
        self,
        account_id: str,
        api_key: str,
        base_url: str = HOSTAWAY_API_BASE,
        timeout: float = 10.0,
        reviews_limit: int = 100,
    ):
        """Initialize Hostaway API client.

        Args:
            account_id: Hostaway account ID (OAuth2 client_id)
            api_key: Hostaway API key (OAuth2 client_secret)
            base_url: Base URL for the Hostaway API
            timeout: Request timeout in seconds
            reviews_limit: Max reviews requested per fetch
        """
        self.account_id = account_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.reviews_limit = reviews_limit

        self.client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.account_id and self.api_key)

    async def close(self):
        """Close the HTTP client and clean up resources."""
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        data: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> dict:
        """Make an HTTP request to the Hostaway API.

        Returns:
            JSON response as dict

        Raises:
            httpx.HTTPStatusError: If response status is not 2xx
            httpx.RequestError: If request fails
            HostawayAPIError: If the body is not a JSON object
        """
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"[HostawayAPIClient] {method} {url} params={params}")

        start_time = time.perf_counter()

        try:
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                data=data,
                headers=headers,
            )

            logger.debug(f"[HostawayAPIClient] Response status: {response.status_code}")

            response.raise_for_status()
            body = response.json()
            if not isinstance(body, dict):
                raise HostawayAPIError(f"Unexpected response body from {endpoint}")

            duration = time.perf_counter() - start_time
            HOSTAWAY_API_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(duration)
            HOSTAWAY_API_CALLS_TOTAL.labels(endpoint=endpoint, status="success").inc()

            return body

        except httpx.HTTPStatusError as e:
            self._record_error(endpoint, start_time, "http_error")
            logger.error(f"[HostawayAPIClient] HTTP error on {method} {endpoint}: {e}")
            raise
        except httpx.TimeoutException as e:
            self._record_error(endpoint, start_time, "timeout")
            logger.error(f"[HostawayAPIClient] Timeout on {method} {endpoint}: {e}")
            raise
        except httpx.RequestError as e:
            self._record_error(endpoint, start_time, "connection_error")
            logger.error(f"[HostawayAPIClient] Request error on {method} {endpoint}: {e}")
            raise
        except (HostawayAPIError, ValueError) as e:
            self._record_error(endpoint, start_time, "bad_response")
            logger.error(f"[HostawayAPIClient] Bad response on {method} {endpoint}: {e}")
            raise HostawayAPIError(str(e)) from e

    def _record_error(self, endpoint: str, start_time: float, error_type: str) -> None:
        duration = time.perf_counter() - start_time
        HOSTAWAY_API_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(duration)
        HOSTAWAY_API_CALLS_TOTAL.labels(endpoint=endpoint, status="error").inc()
        HOSTAWAY_API_ERRORS_TOTAL.labels(endpoint=endpoint, error_type=error_type).inc()

    async def authenticate(self, now: Optional[datetime] = None) -> AccessToken:
        """Obtain a fresh access token via client credentials.

        Raises:
            HostawayAPIError: If credentials are missing or no token is returned
        """
        if not self.is_configured:
            raise HostawayAPIError("Hostaway credentials not configured")

        logger.info("[HostawayAPIClient] Authenticating with Hostaway API")

        body = await self._request(
            "POST",
            "/accessTokens",
            data={
                "grant_type": "client_credentials",
                "client_id": self.account_id,
                "client_secret": self.api_key,
                "scope": "general",
            },
            headers={"Cache-control": "no-cache"},
        )

        if not body.get("access_token"):
            raise HostawayAPIError("No access token received")

        token = AccessToken.from_response(body, now=now)
        logger.info(f"[HostawayAPIClient] Authenticated, token expires at {token.expires_at.isoformat()}")
        return token

    async def ensure_token(
        self, credential: Optional[AccessToken], now: Optional[datetime] = None
    ) -> AccessToken:
        """Return credential if still valid, otherwise a freshly issued one."""
        if credential is not None and not credential.is_expired(now):
            return credential
        return await self.authenticate(now=now)

    async def fetch_reviews(
        self, credential: Optional[AccessToken] = None, now: Optional[datetime] = None
    ) -> tuple[list[dict[str, Any]], AccessToken]:
        """Fetch raw review records.

        Args:
            credential: Previously issued token, refreshed when expired
            now: Current time (for expiry checks)

        Returns:
            (raw review records, token used). Records are [] when Hostaway
            reports anything other than success.

        Raises:
            HostawayAPIError: On auth failure or unusable response
            httpx.HTTPError: On transport or HTTP status failure
        """
        token = await self.ensure_token(credential, now=now)

        body = await self._request(
            "GET",
            "/reviews",
            params={
                "limit": self.reviews_limit,
                "includeResources": REVIEW_INCLUDE_RESOURCES,
            },
            headers={
                "Authorization": f"Bearer {token.token}",
                "Content-Type": "application/json",
            },
        )

        if body.get("status") != "success":
            logger.warning("[HostawayAPIClient] No reviews found in Hostaway API response")
            return [], token

        result = body.get("result") or []
        if not isinstance(result, list):
            raise HostawayAPIError("Hostaway reviews result is not a list")

        logger.info(f"[HostawayAPIClient] Retrieved {len(result)} reviews from Hostaway")
        return result, token
