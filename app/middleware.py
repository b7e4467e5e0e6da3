"""FastAPI middleware for Prometheus metrics instrumentation."""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_PROGRESS,
    HTTP_RESPONSE_SIZE_BYTES,
)

# Path prefixes whose next segment is a free-form identifier
PARAMETERIZED_PREFIXES = {
    ("api", "properties"): "{listing_name}",
    ("api", "google-places", "details"): "{place_id}",
    ("api", "google-places", "reviews"): "{place_id}",
}


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics for Prometheus."""

    # Endpoints to exclude from metrics (like /metrics itself)
    EXCLUDE_PATHS = {"/metrics", "/health", "/ping"}

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and collect metrics."""
        path = request.url.path
        method = request.method

        if path in self.EXCLUDE_PATHS:
            return await call_next(request)

        # Normalize endpoint for metrics (avoid high cardinality from path params)
        endpoint = self._normalize_endpoint(path)

        HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception:
            status_code = 500
            raise
        finally:
            duration = time.perf_counter() - start_time
            HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method, endpoint=endpoint
            ).observe(duration)
            HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).dec()
            HTTP_REQUESTS_TOTAL.labels(
                method=method, endpoint=endpoint, status_code=str(status_code)
            ).inc()

        response_size = response.headers.get("content-length")
        if response_size:
            try:
                HTTP_RESPONSE_SIZE_BYTES.labels(
                    method=method, endpoint=endpoint
                ).observe(int(response_size))
            except ValueError:
                pass

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize URL path to avoid high cardinality from path parameters.

        /api/reviews/7453/approval -> /api/reviews/{id}/approval
        /api/properties/Shoreditch Loft/reviews -> /api/properties/{listing_name}/reviews
        """
        segments = [s for s in path.strip("/").split("/") if s]

        normalized = []
        for segment in segments:
            placeholder = PARAMETERIZED_PREFIXES.get(tuple(normalized))
            if placeholder:
                normalized.append(placeholder)
            elif segment.isdigit():
                normalized.append("{id}")
            else:
                normalized.append(segment)

        return "/" + "/".join(normalized) if normalized else "/"
