import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from captains_log.config import settings
from captains_log.errors import AppError

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "captains_log.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from captains_log.routers import (
    activities,
    albums,
    auth,
    checklists,
    companions,
    entity_links,
    journal,
    locations,
    lodging,
    photos,
    reference,
    tags,
    transportation,
    trips,
    users,
)
from captains_log.services.cache_service import cache_service
from captains_log.services.weather_client import weather_client

logger = logging.getLogger(__name__)


async def refresh_trip_statuses():
    from captains_log.database import async_session_factory
    from captains_log.services.trip_service import trip_service
    async with async_session_factory() as db:
        changed = await trip_service.refresh_statuses(db)
        if changed:
            logger.info(f"Trip status refresh: {changed} trips updated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: launch background scheduler
    scheduler = None
    if settings.scheduler_enabled:
        try:
            scheduler = AsyncIOScheduler()
            scheduler.add_job(
                refresh_trip_statuses,
                IntervalTrigger(minutes=settings.trip_status_refresh_minutes),
                id="trip_status_refresh",
            )
            scheduler.start()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Scheduler failed to start: {e}")
            scheduler = None

    yield

    # Shutdown
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
    await weather_client.close()
    await cache_service.close()


app = FastAPI(
    title="Captain's Log",
    description="Trip planning and travel journal API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(entity_links.router, prefix="/api/trips/{trip_id}/links", tags=["entity-links"])
app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
app.include_router(transportation.router, prefix="/api/transportation", tags=["transportation"])
app.include_router(lodging.router, prefix="/api/lodging", tags=["lodging"])
app.include_router(journal.router, prefix="/api/journal", tags=["journal"])
app.include_router(locations.router, prefix="/api/locations", tags=["locations"])
app.include_router(photos.router, prefix="/api/photos", tags=["photos"])
app.include_router(albums.router, prefix="/api/albums", tags=["albums"])
app.include_router(companions.router, prefix="/api/companions", tags=["companions"])
app.include_router(checklists.router, prefix="/api/checklists", tags=["checklists"])
app.include_router(tags.router, prefix="/api/tags", tags=["tags"])
app.include_router(reference.router, prefix="/api", tags=["reference"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "captains-log"}
