import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Statement-level logs are noisy; DB_ECHO turns them back on explicitly
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def create_db_engine(
    database_url: str,
    pool_min: int = 2,
    pool_max: int = 10,
    echo: bool = False,
) -> Engine:
    """Build a SQLAlchemy engine for ``database_url``.

    Pool sizing:
    - ``pool_min`` connections are kept open (``pool_size``)
    - up to ``pool_max`` in total under load (``max_overflow`` covers the rest)

    SQLite URLs skip pool sizing. In-memory SQLite shares one connection
    through StaticPool so every session sees the same database.
    """
    if database_url.startswith('sqlite'):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ('sqlite://', 'sqlite:///:memory:'):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    pool_size = max(pool_min, 1)
    return create_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max(pool_max - pool_size, 0),
        pool_pre_ping=True,  # Drop dead connections instead of failing the request
    )


def ping(engine: Engine) -> bool:
    """Return True if the database answers ``SELECT 1``."""
    try:
        with engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        logger.error(f"[DATABASE] Ping failed: {str(e)[:200]}")
        return False
