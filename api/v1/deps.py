# api/v1/deps.py
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.db import ProfileStore, get_session


async def get_store(db: AsyncSession = Depends(get_session)) -> ProfileStore:
    return ProfileStore(db)
