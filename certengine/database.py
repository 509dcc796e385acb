"""Database connection and session management."""

import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from certengine.config import settings


def _make_ssl_context_for_supabase():
    """SSL context for Supabase pooler connections (no cert chain verification)."""
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def strip_ssl_params(url: str) -> str:
    """Drop sslmode/ssl query params, which asyncpg rejects."""
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    query.pop("sslmode", None)
    query.pop("ssl", None)
    return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))


def get_engine_url_and_connect_args(url: str) -> tuple[str, dict]:
    """Move SSL settings from the URL into connect_args for asyncpg."""
    connect_args = {}
    if "sslmode=" in url or "ssl=" in url:
        if "supabase" in url:
            connect_args["ssl"] = _make_ssl_context_for_supabase()
        url = strip_ssl_params(url)
    return url, connect_args


_db_url, _connect_args = get_engine_url_and_connect_args(settings.database_url)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


engine = create_async_engine(
    _db_url,
    echo=settings.log_level == "DEBUG",
    connect_args=_connect_args,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database sessions.

    Certification writes commit per employee inside the store, so this only
    guarantees the session is rolled back and closed on the way out.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
