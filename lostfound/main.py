import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from lostfound.config import get_settings
from lostfound.routers import auth, claims, items, messages, notifications, profile, realtime, uploads
from lostfound.db.db import create_db_and_tables
from lostfound.errors import LostFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up...")
    Path(get_settings().storage_root).mkdir(parents=True, exist_ok=True)
    try:
        create_db_and_tables()
        logger.info("DB ready.")
    except Exception:
        logger.exception("Cannot connect to DB")
    yield
    logger.info("Shutting down...")


async def handle_lost_found_error(request: Request, exc: LostFoundError):
    # Transient notice for the client; nothing is retried
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(lifespan=lifespan)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LostFoundError, handle_lost_found_error)

    # Register routers
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(items.router, prefix="/items", tags=["Items"])
    app.include_router(claims.router, prefix="/claims", tags=["Claims"])
    app.include_router(messages.router, prefix="/messages", tags=["Messages"])
    app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
    app.include_router(profile.router, prefix="/profile", tags=["Profile"])
    app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
    app.include_router(realtime.router, prefix="/realtime", tags=["Realtime"])

    # Public URLs handed out by the storage service
    app.mount("/storage", StaticFiles(directory=settings.storage_root, check_dir=False), name="storage")

    @app.get("/")
    def root():
        return {"status": "ok"}

    return app


app = create_app()
