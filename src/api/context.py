"""Application context: the dependency graph built once at startup.

``build_context`` picks the repository backend and is called from the
FastAPI lifespan; routes reach it through ``api.dependencies``.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from adapter.memory.user_repository import InMemoryUserRepository
from adapter.sql.connection import create_db_engine, ping
from adapter.sql.tables import ensure_schema
from adapter.sql.user_repository import SqlUserRepository
from port.user_repository import UserRepository
from utils.settings import Settings

logger = logging.getLogger(__name__)

BACKEND_SQL = 'sql'
BACKEND_MEMORY = 'memory'


@dataclass
class AppContext:
    settings: Settings
    user_repository: UserRepository
    engine: Engine | None = None

    @property
    def backend(self) -> str:
        return BACKEND_SQL if self.engine is not None else BACKEND_MEMORY

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("[DATABASE] Connection pool disposed")


def build_user_repository(settings: Settings) -> UserRepository:
    """Select the user repository backend.

    Selection rule:
    1. No DATABASE_URL → in-memory repository
    2. DATABASE_URL set → SQL repository, if the engine can be built,
       answers a ping and the schema is in place
    3. Any failure in step 2 → warning, then in-memory repository
    """
    if not settings.database_url:
        logger.info("No DATABASE_URL found, using in-memory repository")
        return InMemoryUserRepository()

    try:
        engine = create_db_engine(
            settings.database_url,
            pool_min=settings.db_pool_min,
            pool_max=settings.db_pool_max,
            echo=settings.db_echo,
        )
    except (SQLAlchemyError, ImportError, ValueError) as e:
        logger.warning(
            "Failed to initialize SQL repository, falling back to in-memory",
            extra={"error": str(e)[:200]},
        )
        return InMemoryUserRepository()

    if not ping(engine) or not ensure_schema(engine):
        engine.dispose()
        logger.warning("Database unreachable, falling back to in-memory repository")
        return InMemoryUserRepository()

    logger.info("Using SQL repository")
    return SqlUserRepository(engine)


def build_context(settings: Settings) -> AppContext:
    repo = build_user_repository(settings)
    engine = repo.engine if isinstance(repo, SqlUserRepository) else None
    return AppContext(settings=settings, user_repository=repo, engine=engine)
