"""Main entry point for the flex-reviews-server application.

Startup sequence:
1. Initialize DI container
2. Build the initial review snapshot (Hostaway, falling back to mock data)
3. Start the scheduled snapshot refresh job
4. Start HTTP server with FastAPI
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import Settings
from app.container import Container
from app.routers import review_router, set_review_handler, places_router, set_places_handler
from app.middleware import PrometheusMiddleware
from app.metrics import (
    BACKGROUND_JOB_RUNS_TOTAL,
    BACKGROUND_JOB_DURATION_SECONDS,
    BACKGROUND_JOB_LAST_RUN_TIMESTAMP,
)

settings = Settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global container and scheduler
container: Container = None
scheduler: AsyncIOScheduler = None


async def run_review_refresh_job():
    """Background job: Rebuild the review snapshot from Hostaway."""
    job_name = "review_refresh"
    logger.info("[Scheduler] Running ReviewRefreshJob")
    start_time = time.perf_counter()
    try:
        await container.review_service.refresh()
        duration = time.perf_counter() - start_time
        BACKGROUND_JOB_DURATION_SECONDS.labels(job_name=job_name).observe(duration)
        BACKGROUND_JOB_RUNS_TOTAL.labels(job_name=job_name, status="success").inc()
        BACKGROUND_JOB_LAST_RUN_TIMESTAMP.labels(job_name=job_name).set_to_current_time()
        logger.info("[Scheduler] ReviewRefreshJob completed")
    except Exception as e:
        duration = time.perf_counter() - start_time
        BACKGROUND_JOB_DURATION_SECONDS.labels(job_name=job_name).observe(duration)
        BACKGROUND_JOB_RUNS_TOTAL.labels(job_name=job_name, status="error").inc()
        logger.error(f"[Scheduler] ReviewRefreshJob failed: {e}")


def start_background_jobs(settings: Settings):
    """Start background jobs using APScheduler."""
    global scheduler
    scheduler = AsyncIOScheduler()

    if settings.reviews_refresh_minutes <= 0:
        logger.info("[Scheduler] Review refresh job disabled (REVIEWS_REFRESH_MINUTES<=0)")
    else:
        scheduler.add_job(
            run_review_refresh_job,
            trigger=IntervalTrigger(minutes=settings.reviews_refresh_minutes),
            id="review_refresh",
            name="Review Snapshot Refresh",
            replace_existing=True,
        )
        logger.info(
            f"[Scheduler] Scheduled review refresh every "
            f"{settings.reviews_refresh_minutes} minutes"
        )

    scheduler.start()
    logger.info("[Scheduler] Background jobs started")


async def startup_sequence(settings: Settings):
    """Run the initial review load before starting jobs."""
    global container

    logger.info("[Main] Starting startup sequence")

    logger.info("[Main] Initializing DI container")
    container = Container(settings)

    # Inject handlers into routers (routes already registered at app creation)
    logger.info("[Main] Injecting handlers into routers")
    set_review_handler(container.review_handler)
    set_places_handler(container.places_handler)
    logger.info("[Main] Handlers injected successfully")

    if settings.refresh_on_startup:
        logger.info("[Main] Loading reviews (initial load)")
        try:
            snapshot = await container.review_service.refresh()
            logger.info(
                f"[Main] Initial review load completed: {len(snapshot.reviews)} reviews "
                f"from {snapshot.source}"
            )
        except Exception as e:
            logger.error(f"[Main] Initial review load failed: {e}")
    else:
        logger.info("[Main] Skipping initial refresh (REFRESH_ON_STARTUP=false)")

    logger.info("[Main] Starting periodic jobs")
    start_background_jobs(settings)

    logger.info("[Main] Startup sequence completed")


async def shutdown_sequence():
    """Clean up resources on shutdown."""
    global container, scheduler

    logger.info("[Main] Starting shutdown sequence")

    if scheduler:
        logger.info("[Main] Stopping scheduler")
        scheduler.shutdown(wait=False)
        logger.info("[Main] Scheduler stopped")

    if container:
        logger.info("[Main] Shutting down container")
        await container.shutdown()
        logger.info("[Main] Container shut down")

    logger.info("[Main] Shutdown sequence completed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown."""
    await startup_sequence(Settings())
    yield
    await shutdown_sequence()


# Create FastAPI app
app = FastAPI(
    title="Flex Reviews API",
    description="Guest review aggregation, moderation and analytics service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Prometheus metrics middleware
app.add_middleware(PrometheusMiddleware)

# Register routers at app creation time (before uvicorn starts)
app.include_router(review_router)
app.include_router(places_router)


# Health check endpoint
@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Prometheus metrics endpoint
@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    """Prometheus metrics endpoint for scraping."""
    return PlainTextResponse(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


if __name__ == "__main__":
    import uvicorn

    logger.info("[Main] Starting Flex Reviews server")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
