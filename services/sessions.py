"""
In-memory registry of open profile edit sessions.

Each session owns one `ProfileView` (and so one draft).  Nothing is shared
between sessions; handlers run on a single event loop, so no locking.
"""
from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass

from config import settings
from core.models.preference_set import PreferenceSet
from core.profile_view import ProfileView, SessionState

_LOG = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


@dataclass
class EditSession:
    session_id: str
    user_id: int
    view: ProfileView


class SessionRegistry:
    def __init__(self, max_open: int | None = None, placeholder: str | None = None) -> None:
        self._max_open = settings.max_open_sessions if max_open is None else max_open
        self._placeholder = placeholder or settings.placeholder_image
        self._sessions: OrderedDict[str, EditSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, user_id: int, prefs: PreferenceSet) -> EditSession:
        while self._sessions and len(self._sessions) >= self._max_open:
            stale = self._sessions.pop(self._eviction_candidate())
            _LOG.info(
                "evicting edit session %s for user %s (%s)",
                stale.session_id,
                stale.user_id,
                stale.view.state.value,
            )

        session = EditSession(
            session_id=uuid.uuid4().hex,
            user_id=user_id,
            view=ProfileView(prefs, placeholder=self._placeholder),
        )
        self._sessions[session.session_id] = session
        _LOG.info("opened edit session %s for user %s", session.session_id, user_id)
        return session

    def _eviction_candidate(self) -> str:
        """Oldest session holding no unsaved edits, else the oldest of all."""
        for session_id, session in self._sessions.items():
            view = session.view
            if view.state is not SessionState.EDITING and not view.committing:
                return session_id
        return next(iter(self._sessions))

    def get(self, session_id: str) -> EditSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None

    def close(self, session_id: str) -> EditSession:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        _LOG.info("closed edit session %s", session_id)
        return session

    def sessions_for(self, user_id: int) -> list[EditSession]:
        return [s for s in self._sessions.values() if s.user_id == user_id]


registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    return registry
