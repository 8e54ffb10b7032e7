"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for the profile + food-preference tables
* Small DAO helpers used by routers / scripts
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, List

from sqlalchemy import String, Text, select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncAttrs,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.models.preference_set import PreferenceSet

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    # 1) plain TCP URL
    if settings.database_url:
        return create_async_engine(settings.database_url, pool_pre_ping=True)

    # 2) Cloud SQL connector (only if URL not supplied)
    if not settings.cloud_sql_instance:
        raise RuntimeError(
            "Set either DATABASE_URL or CLOUD_SQL_CONNECTION_NAME env var"
        )

    # lazy import here
    try:
        from google.cloud.sql.connector import ConnectorAsync, IPTypes  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "cloud-sql-python-connector missing. Run:\n"
            "pip install 'cloud-sql-python-connector[asyncpg]>=1.4.0'"
        ) from exc

    connector = ConnectorAsync()

    async def _getconn():  # type: ignore[name-defined]
        return await connector.connect_async(
            settings.cloud_sql_instance,
            "asyncpg",
            user=settings.db_user,
            password=settings.db_pass,
            db=settings.db_name,
            ip_type=IPTypes.PRIVATE,
        )

    return create_async_engine(
        "postgresql+asyncpg://",
        creator=_getconn,
        pool_pre_ping=True,
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


async def dispose_engine() -> None:
    global _ENGINE
    if _ENGINE is not None:
        await _ENGINE.dispose()
        _ENGINE = None


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String)
    email: Mapped[str | None] = mapped_column(String)
    profile_picture: Mapped[str | None] = mapped_column(Text)


class UserFoodPreferences(Base):
    __tablename__ = "user_food_preferences"

    user_id: Mapped[int] = mapped_column(primary_key=True)
    likes: Mapped[str | None] = mapped_column(Text)     # serialized list
    dislikes: Mapped[str | None] = mapped_column(Text)  # serialized list


async def create_tables() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ───────── DAO helpers ───────────────────────────────────────────────

def _decode(raw: str | None) -> List[str]:
    data = json.loads(raw or "[]")
    if not isinstance(data, list):
        _LOG.warning("stored food list is %s, not a list; treating as empty", type(data).__name__)
        return []
    return [str(item) for item in data if item is not None]


async def load_preference_set(db: AsyncSession, user_id: int) -> PreferenceSet | None:
    user = await db.get(User, user_id)
    if user is None:
        return None
    prefs = (
        await db.execute(
            select(UserFoodPreferences).where(UserFoodPreferences.user_id == user_id)
        )
    ).scalar_one_or_none()
    return PreferenceSet(
        name=user.name or "",
        email=user.email or "",
        likes=_decode(prefs.likes) if prefs else [],
        dislikes=_decode(prefs.dislikes) if prefs else [],
        profile_picture=user.profile_picture,
    )


async def save_preference_lists(
    db: AsyncSession, user_id: int, prefs: PreferenceSet
) -> None:
    """Upsert only the two lists; identity and image columns are left alone."""
    row = await db.get(UserFoodPreferences, user_id)
    if row is None:
        row = UserFoodPreferences(user_id=user_id)
        db.add(row)
    row.likes = json.dumps(prefs.likes)
    row.dislikes = json.dumps(prefs.dislikes)
    try:
        await db.commit()
    except Exception as exc:
        _LOG.error("saving food lists for user %s failed: %s", user_id, exc)
        await db.rollback()
        raise


async def save_profile_picture(
    db: AsyncSession, user_id: int, reference: str | None
) -> bool:
    user = await db.get(User, user_id)
    if user is None:
        return False
    user.profile_picture = reference
    try:
        await db.commit()
    except Exception as exc:
        _LOG.error("saving profile picture for user %s failed: %s", user_id, exc)
        await db.rollback()
        raise
    return True


# ───────── session helper ────────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """`async with` flavour of `get_session` for scripts."""
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


# ───────── store facade used by the routers ─────────────────────────

class ProfileStore:
    """Binds the DAO helpers to one session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def load(self, user_id: int) -> PreferenceSet | None:
        return await load_preference_set(self._db, user_id)

    async def save_lists(self, user_id: int, prefs: PreferenceSet) -> None:
        await save_preference_lists(self._db, user_id, prefs)

    async def save_image(self, user_id: int, reference: str | None) -> bool:
        return await save_profile_picture(self._db, user_id, reference)
