from dotenv import load_dotenv
import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import create_engine_and_sessionmaker
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging

# ───────────────── ROUTER IMPORTS ─────────────────
from app.routes.auth import router as auth_router
from app.routes.students import router as students_router
from app.routes.topics import router as topics_router
from app.routes.topics import lessons_router
from app.routes.study_sessions import router as study_sessions_router
from app.routes.activity_records import books_router, games_router, going_out_router
from app.routes.dashboard import router as dashboard_router

logger = logging.getLogger(__name__)

APP_TITLE = "Study Tracker API"


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the application. The engine is created in the lifespan and kept on
    app.state, so tests can point the app at their own database.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        url = database_url or settings.DATABASE_URL
        engine, session_factory = create_engine_and_sessionmaker(url, echo=settings.DEBUG)
        app.state.engine = engine
        app.state.session_factory = session_factory
        logger.info("Started %s (env=%s, db=%s)", APP_TITLE, settings.APP_ENV, engine.dialect.name)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Database engine disposed")

    app = FastAPI(
        title=APP_TITLE,
        description="Backend API for students tracking study sessions and daily activities",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # ───────────────── CORS ─────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list or ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ───────────────── ROUTES ─────────────────

    app.include_router(auth_router, prefix="/api")
    app.include_router(students_router, prefix="/api")

    # Topics (progress, search and import live under /api/topics)
    app.include_router(lessons_router, prefix="/api")
    app.include_router(topics_router, prefix="/api")

    app.include_router(study_sessions_router, prefix="/api")

    # Other daily activities
    app.include_router(books_router, prefix="/api")
    app.include_router(games_router, prefix="/api")
    app.include_router(going_out_router, prefix="/api")

    app.include_router(dashboard_router, prefix="/api")

    # ───────────────── HEALTH ─────────────────

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "status": "ok",
            "app": APP_TITLE,
            "env": settings.APP_ENV,
        }

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
