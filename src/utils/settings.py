"""Application settings read from the environment.

``load_dotenv()`` runs in ``api.main`` before the first ``get_settings()``
call, so values from a local ``.env`` file are picked up too.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class Settings(BaseModel):
    environment: str = 'development'
    port: int = 8000
    log_level: str = 'INFO'

    # Database (optional; without it the in-memory backend is used)
    database_url: str | None = None
    db_pool_min: int = 2
    db_pool_max: int = 10
    db_echo: bool = False

    # Comma-separated list, or "*"
    cors_origins: str = '*'

    # Opt-in: apply list filters before paging instead of bypassing paging
    compose_filters: bool = False

    @field_validator('database_url', mode='before')
    @classmethod
    def blank_url_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'

    @classmethod
    def from_env(cls) -> 'Settings':
        environment = os.getenv('ENVIRONMENT') or os.getenv('NODE_ENV') or 'development'
        default_pool_max = '20' if environment == 'production' else '10'
        return cls(
            environment=environment,
            port=int(os.getenv('PORT', '8000')),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            database_url=os.getenv('DATABASE_URL'),
            db_pool_min=int(os.getenv('DB_POOL_MIN', '2')),
            db_pool_max=int(os.getenv('DB_POOL_MAX', default_pool_max)),
            db_echo=_env_flag('DB_ECHO'),
            cors_origins=os.getenv('CORS_ORIGINS', '*'),
            compose_filters=_env_flag('USERS_COMPOSE_FILTERS'),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
