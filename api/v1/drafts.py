# api/v1/drafts.py
from __future__ import annotations

from functools import partial
from fastapi import APIRouter, Depends, HTTPException, Response, status

from core.commit import CommitInProgress, CommitPersistError
from services.db import ProfileStore
from services.sessions import EditSession, SessionNotFound, SessionRegistry, get_registry
from api.v1.deps import get_store
from api.v1.schemas import DraftOut, EditResult, ListKind, TextIn

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def _session(sessions: SessionRegistry, session_id: str) -> EditSession:
    try:
        return sessions.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Edit session not found")


def _render(session: EditSession) -> DraftOut:
    return DraftOut(
        session_id=session.session_id,
        user_id=session.user_id,
        **session.view.render(),
    )


# ───────────────────────── open ─────────────────────────────
@router.post(
    "/profiles/{user_id}/drafts",
    response_model=DraftOut,
    status_code=status.HTTP_201_CREATED,
    summary="Start an edit session seeded from the committed profile",
)
async def open_draft(
    user_id: int,
    store: ProfileStore = Depends(get_store),
    sessions: SessionRegistry = Depends(get_registry),
) -> DraftOut:
    prefs = await store.load(user_id)
    if prefs is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _render(sessions.open(user_id, prefs))


@router.get("/drafts/{session_id}", response_model=DraftOut)
async def get_draft(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> DraftOut:
    return _render(_session(sessions, session_id))


# ───────────────────────── input buffers ────────────────────
@router.put("/drafts/{session_id}/inputs/{kind}", response_model=DraftOut)
async def set_input(
    session_id: str,
    kind: ListKind,
    body: TextIn,
    sessions: SessionRegistry = Depends(get_registry),
) -> DraftOut:
    session = _session(sessions, session_id)
    if kind is ListKind.likes:
        session.view.set_input_like(body.text)
    else:
        session.view.set_input_dislike(body.text)
    return _render(session)


# ───────────────────────── commit ───────────────────────────
@router.post(
    "/drafts/{session_id}/commit",
    response_model=DraftOut,
    summary="Persist the draft lists and make them the committed profile",
)
async def commit_draft(
    session_id: str,
    store: ProfileStore = Depends(get_store),
    sessions: SessionRegistry = Depends(get_registry),
) -> DraftOut:
    session = _session(sessions, session_id)
    try:
        await session.view.commit_and_persist(
            partial(store.save_lists, session.user_id)
        )
    except CommitInProgress:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A commit for this session is already being saved",
        )
    except CommitPersistError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not save preferences: {exc}",
        )
    return _render(session)


# ───────────────────────── add / remove ─────────────────────
@router.post("/drafts/{session_id}/{kind}", response_model=EditResult)
async def add_entry(
    session_id: str,
    kind: ListKind,
    body: TextIn | None = None,
    sessions: SessionRegistry = Depends(get_registry),
) -> EditResult:
    session = _session(sessions, session_id)
    view = session.view
    if kind is ListKind.likes:
        if body is not None:
            view.set_input_like(body.text)
        accepted = view.add_like()
    else:
        if body is not None:
            view.set_input_dislike(body.text)
        accepted = view.add_dislike()
    return EditResult(accepted=accepted, draft=_render(session))


@router.delete("/drafts/{session_id}/{kind}/{name:path}", response_model=EditResult)
async def remove_entry(
    session_id: str,
    kind: ListKind,
    name: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> EditResult:
    session = _session(sessions, session_id)
    if kind is ListKind.likes:
        accepted = session.view.remove_like(name)
    else:
        accepted = session.view.remove_dislike(name)
    return EditResult(accepted=accepted, draft=_render(session))


# ───────────────────────── abandon ──────────────────────────
@router.delete(
    "/drafts/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard the draft and close the session",
)
async def abandon_draft(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> Response:
    session = _session(sessions, session_id)
    try:
        session.view.abandon()
    except CommitInProgress:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot discard while a commit is being saved",
        )
    sessions.close(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
