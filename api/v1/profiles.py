from __future__ import annotations

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from config import settings
from core.models.preference_set import PreferenceSet
from services.db import ProfileStore
from services.sessions import SessionRegistry, get_registry
from api.v1.deps import get_store
from api.v1.schemas import ImageIn, ProfileOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── helpers ──────────────────────────
def _serialize(user_id: int, prefs: PreferenceSet) -> ProfileOut:
    return ProfileOut(
        user_id=user_id,
        name=prefs.name,
        email=prefs.email,
        image=prefs.image_or(settings.placeholder_image),
        likes=prefs.likes,
        dislikes=prefs.dislikes,
    )


# ───────────────────────── read ─────────────────────────────
@router.get(
    "/{user_id}",
    response_model=ProfileOut,
    status_code=status.HTTP_200_OK,
    summary="Committed profile with both food lists",
)
async def get_profile(
    user_id: int,
    store: ProfileStore = Depends(get_store),
) -> ProfileOut:
    prefs = await store.load(user_id)
    if prefs is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _serialize(user_id, prefs)


# ───────────────────────── image hand-off ───────────────────
@router.put(
    "/{user_id}/image",
    response_model=ProfileOut,
    status_code=status.HTTP_200_OK,
    summary="Store a completed profile image reference",
)
async def set_profile_image(
    user_id: int,
    body: ImageIn,
    store: ProfileStore = Depends(get_store),
    sessions: SessionRegistry = Depends(get_registry),
) -> ProfileOut:
    if not await store.save_image(user_id, body.reference):
        raise HTTPException(status_code=404, detail="User not found")

    # open drafts keep their lists, only the picture changes
    for session in sessions.sessions_for(user_id):
        session.view.receive_image(body.reference)
    _LOG.info("profile image updated for user %s", user_id)

    prefs = await store.load(user_id)
    if prefs is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _serialize(user_id, prefs)
