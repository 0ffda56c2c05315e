"""Wheelhouse API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WheelhouseError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Startup order: logging → database → runtime → tick driver;
      shutdown runs in reverse so no tick touches a disposed engine

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One RoundController per process, held on app.state (single scheduling authority)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.dependencies import install_runtime
from app.api.error_handlers import register_error_handlers
from app.api.routes import game_state, health, history, round_socket
from app.config import get_settings
from app.infrastructure.broadcast_hub import BroadcastHub
from app.infrastructure.database import close_db, init_db
from app.infrastructure.observability import setup_logging
from app.infrastructure.round_repository import (
    SqlHistoryRepository, SqlRoundRepository,
)
from app.services.round_controller import RoundController
from app.services.tick_driver import TickDriver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    hub = BroadcastHub()
    controller = RoundController.from_settings(
        settings, SqlRoundRepository(), SqlHistoryRepository(), hub,
    )
    install_runtime(app, controller, hub)
    driver = TickDriver(controller.tick, settings.tick_interval_seconds)
    app.state.tick_driver = driver
    driver.start()
    logger.info("Wheelhouse API started")
    yield
    logger.info("Wheelhouse API shutting down")
    await driver.stop()
    await close_db()


app = FastAPI(
    title="Wheelhouse API", version="1.0.0", lifespan=lifespan,
)

# CORS: origins come from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(game_state.router)
app.include_router(history.router)
app.include_router(round_socket.router)

register_error_handlers(app)

# Static files: observer UI build, when present
# Mounted AFTER API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
