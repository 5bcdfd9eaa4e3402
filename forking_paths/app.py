import logging

from fastapi import FastAPI

from forking_paths.config import Settings, configure_logging, load_settings
from forking_paths.garden.game import build_garden_game
from forking_paths.guild import GuildRegistry
from forking_paths.models import Game
from forking_paths.platform import MemoryPlatform
from forking_paths.routes import router
from forking_paths.storage import Storage

logger = logging.getLogger(__name__)


def memory_platform_factory(game: Game):
    """Every guild gets a fresh in-memory platform with all channels and roles."""
    def factory(guild_id: str) -> MemoryPlatform:
        platform = MemoryPlatform()
        platform.provision(game)
        return platform
    return factory


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    game = build_garden_game(gm_role_name=settings.gm_role_name)
    storage = Storage(settings.data_dir)
    if not settings.content_dir.is_dir():
        logger.warning("Content directory %s not found; scenes will be sent without materials",
                       settings.content_dir)

    app = FastAPI(title=game.title)
    app.state.settings = settings
    app.state.registry = GuildRegistry(
        game, storage, memory_platform_factory(game), settings.content_dir
    )
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
