"""FastAPI web application for the UpPaws tournament service."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config.settings import AppConfig, get_default_config
from ..tournaments.api import TournamentAPI
from ..tournaments.database import create_store
from ..tournaments.manager import TournamentManager
from .endpoints.system import router as system_router
from .endpoints.tournaments import router as tournaments_router

logger: logging.Logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None, manager: TournamentManager | None = None
) -> FastAPI:
    """Build the app around one explicitly constructed tournament manager."""
    config = config or get_default_config()

    if manager is None:
        manager = TournamentManager(
            store=create_store(config.storage),
            settings=config.tournaments,
        )

    app: FastAPI = FastAPI(
        title="UpPaws Tournament Service",
        description="Tournaments, brackets and skill ratings for UpPaws",
        version="1.0.0",
    )
    app.state.config = config
    app.state.tournament_manager = manager
    app.state.tournament_api = TournamentAPI(manager)

    if config.system.allowed_origins:
        logger.info(f"Setting CORS allowed origins: {config.system.allowed_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.system.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(system_router)
    app.include_router(tournaments_router)

    logger.info(f"Tournament service ready ({config.storage.backend} storage)")
    return app
