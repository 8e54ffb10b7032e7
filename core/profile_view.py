"""
core/profile_view.py
────────────────────────────────────────────────────────────────────────
Presentation glue for the food-preference page.

`ProfileView` owns the committed `PreferenceSet` and one live
`DraftEditor`.  It exposes the page affordances (add / remove / type /
commit / abandon) and turns its state into a plain dict via `render()`.
All list mutation is delegated to the draft and the commit controller.

Re-rendering is explicit: callbacks registered with `subscribe()` are
called with the view after every change.

Per editing session:

    SEEDED ─► EDITING ─┬─► COMMITTED
                       └─► ABANDONED

The two end states are terminal for that session.  The draft is re-seeded
from the committed set right away, and the next successful edit opens a new
session in EDITING.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

from core.commit import CommitController, CommitInProgress, Persist
from core.draft_editor import DraftEditor
from core.models.preference_set import DEFAULT_PLACEHOLDER, PreferenceSet

_LOG = logging.getLogger(__name__)

Listener = Callable[["ProfileView"], None]


class SessionState(str, Enum):
    SEEDED = "seeded"
    EDITING = "editing"
    COMMITTED = "committed"
    ABANDONED = "abandoned"


class ProfileView:
    def __init__(
        self,
        preferences: PreferenceSet,
        placeholder: str = DEFAULT_PLACEHOLDER,
        controller: CommitController | None = None,
    ) -> None:
        self._controller = controller or CommitController()
        self._listeners: List[Listener] = []
        self.placeholder = placeholder
        self.preferences = preferences
        self.draft = DraftEditor(preferences)
        self.state = SessionState.SEEDED
        self.notice: str | None = None
        self.committing = False   # a persisted commit is awaiting storage

    # ─────────────────────────────── observers ────────────────────── #
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in self._listeners:
            listener(self)

    # ─────────────────────────────── inputs ───────────────────────── #
    def set_input_like(self, text: str) -> None:
        self.draft.set_input_like(text)
        self._changed()

    def set_input_dislike(self, text: str) -> None:
        self.draft.set_input_dislike(text)
        self._changed()

    # ──────────────────────────── list edits ──────────────────────── #
    # While a commit is being written the pending lists are frozen, so the
    # staged copy and the draft cannot drift apart.
    def add_like(self) -> bool:
        if self.committing:
            return self._edited(False, _SAVING)
        candidate = self.draft.input_like
        ok = self.draft.add_like(candidate)
        return self._edited(ok, _add_notice(candidate, "likes"))

    def add_dislike(self) -> bool:
        if self.committing:
            return self._edited(False, _SAVING)
        candidate = self.draft.input_dislike
        ok = self.draft.add_dislike(candidate)
        return self._edited(ok, _add_notice(candidate, "dislikes"))

    def remove_like(self, name: str) -> bool:
        if self.committing:
            return self._edited(False, _SAVING)
        ok = self.draft.remove_like(name)
        return self._edited(ok, f"'{name}' is not in your likes")

    def remove_dislike(self, name: str) -> bool:
        if self.committing:
            return self._edited(False, _SAVING)
        ok = self.draft.remove_dislike(name)
        return self._edited(ok, f"'{name}' is not in your dislikes")

    def _edited(self, ok: bool, rejection: str) -> bool:
        if ok:
            self.state = SessionState.EDITING
            self.notice = None
        else:
            self.notice = rejection
        self._changed()
        return ok

    # ──────────────────────────── commit / abandon ────────────────── #
    def commit(self) -> PreferenceSet:
        self._ensure_idle()
        self._apply(self._controller.commit(self.draft, self.preferences))
        return self.preferences

    async def commit_and_persist(self, persist: Persist) -> PreferenceSet:
        """Commit once `persist` succeeds; on failure nothing changes.

        Only one persisted commit may be in flight per view; a second one
        raises `CommitInProgress`.  List edits are refused until it settles.
        """
        self._ensure_idle()
        self.committing = True
        self._changed()
        try:
            staged = await self._controller.commit_and_persist(
                self.draft, self.preferences, persist
            )
        finally:
            self.committing = False
        self._apply(staged, keep_inputs=True)
        return self.preferences

    def _ensure_idle(self) -> None:
        if self.committing:
            raise CommitInProgress("a commit is already being saved")

    def _apply(self, committed: PreferenceSet, keep_inputs: bool = False) -> None:
        # only the lists come from the commit; the image may have changed
        # while storage was being written
        self.preferences = self.preferences.model_copy(
            update={
                "likes": list(committed.likes),
                "dislikes": list(committed.dislikes),
            },
            deep=True,
        )
        typed = (self.draft.input_like, self.draft.input_dislike)
        self.draft.reset(self.preferences)
        if keep_inputs:
            self.draft.input_like, self.draft.input_dislike = typed
        self.state = SessionState.COMMITTED
        self.notice = None
        _LOG.debug("view now holds %d likes", len(self.preferences.likes))
        self._changed()

    def abandon(self) -> None:
        self._ensure_idle()
        self.draft.reset(self.preferences)
        self.state = SessionState.ABANDONED
        self.notice = None
        self._changed()

    # ──────────────────────────── image hand-off ──────────────────── #
    def receive_image(self, reference: str | None) -> None:
        """Take a finished upload reference; pending lists are untouched."""
        self.preferences = self.preferences.with_image(reference)
        self._changed()

    # ─────────────────────────────── render ───────────────────────── #
    @property
    def dirty(self) -> bool:
        return self.draft.is_dirty(self.preferences)

    def render(self) -> Dict[str, Any]:
        draft = self.draft.snapshot()
        return {
            "name": self.preferences.name,
            "email": self.preferences.email,
            "image": self.preferences.image_or(self.placeholder),
            "likes": draft["likes"],
            "dislikes": draft["dislikes"],
            "input_like": draft["input_like"],
            "input_dislike": draft["input_dislike"],
            "state": self.state.value,
            "dirty": self.dirty,
            "notice": self.notice,
            "committing": self.committing,
        }


_SAVING = "Saving your changes, try again in a moment"


def _add_notice(candidate: str, kind: str) -> str:
    if not candidate.strip():
        return "Enter a food name first"
    return f"'{candidate.strip()}' is already in your {kind}"
