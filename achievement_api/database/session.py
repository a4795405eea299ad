from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from achievement_api.config import Settings, settings


def build_sqlalchemy_database_url_from_settings(_settings: Settings) -> str:
    """
    Builds an async SQLAlchemy URL based on the provided settings.

    Parameters:
        _settings (Settings): An instance of the Settings class
        containing either DATABASE_URL or the PostgreSQL connection details.

    Returns:
        str: The generated SQLAlchemy URL.
    """
    if _settings.DATABASE_URL:
        return _settings.DATABASE_URL
    return (
        f"postgresql+asyncpg://{_settings.POSTGRES_USER}:{_settings.POSTGRES_PASSWORD}"
        f"@{_settings.POSTGRES_HOST}:{_settings.POSTGRES_PORT}/{_settings.POSTGRES_DB}"
    )


def to_sync_url(database_url: str) -> str:
    """Swaps the async driver for its blocking counterpart."""
    return (
        database_url
        .replace("postgresql+asyncpg", "postgresql+psycopg")
        .replace("sqlite+aiosqlite", "sqlite")
    )


def get_engine(database_url: str, echo=False) -> Engine:
    """
    Creates and returns a blocking SQLAlchemy Engine, used by maintenance scripts.

    Parameters:
        database_url (str): The URL of the database to connect to.
        echo (bool): Whether or not to enable echoing of SQL statements.
        Defaults to False.

    Returns:
        Engine: A SQLAlchemy Engine object representing the database connection.
    """
    return create_engine(to_sync_url(database_url), echo=echo)


def get_async_engine(database_url: str, echo=False, **kwargs) -> AsyncEngine:
    """
    Creates the async engine used by request handlers.

    Pool settings only apply to server databases; SQLite gets the driver defaults.
    """
    if database_url.startswith("postgresql"):
        kwargs.setdefault("pool_size", 5)
        kwargs.setdefault("max_overflow", 5)
        kwargs.setdefault("pool_timeout", 30)
        kwargs.setdefault("pool_recycle", 1800)
        kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(database_url, echo=echo, **kwargs)


def get_async_session(database_url: str, echo=False, **kwargs) -> async_sessionmaker:
    """
    Returns an async sessionmaker for async DB operations.
    """
    engine = get_async_engine(database_url, echo, **kwargs)
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


@lru_cache(maxsize=1)
def get_default_session_maker() -> async_sessionmaker:
    return get_async_session(SQLALCHEMY_DATABASE_URL)


SQLALCHEMY_DATABASE_URL = build_sqlalchemy_database_url_from_settings(settings)
