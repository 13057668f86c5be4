"""Harbor Quest API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map HarborQuestError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and GameRegistry created on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Registry on app.state: one in-memory owner of live games per process
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from harbor_quest.api.error_handlers import register_error_handlers
from harbor_quest.api.routes import game_sessions, health, leaderboard, rounds, users
from harbor_quest.config import get_settings
from harbor_quest.infrastructure.database import close_db, init_db
from harbor_quest.infrastructure.observability import setup_logging
from harbor_quest.services.game_registry import GameRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(settings)
    logger.info("Harbor Quest API started")
    yield
    logger.info(
        f"Harbor Quest API shutting down, {len(app.state.game_registry)} live games dropped",
    )
    await close_db()


settings = get_settings()
app = FastAPI(title="Harbor Quest API", version="1.0.0", lifespan=lifespan)
app.state.game_registry = GameRegistry(summary_capacity=settings.finished_summary_capacity)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(game_sessions.router)
app.include_router(rounds.router)
app.include_router(leaderboard.router)
app.include_router(users.router)

register_error_handlers(app)
