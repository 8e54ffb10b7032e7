"""
core/commit.py
────────────────────────────────────────────────────────────────────────
Turns a draft into committed state.

`commit()` never mutates the target it is given: it returns a fresh
`PreferenceSet` carrying value copies of both pending lists and every
other field of the target.  Both lists are swapped together or not at all.

`commit_and_persist()` stages that new set in memory first and only hands
it back once the storage callback has succeeded, so a failed write leaves
the caller holding its previous committed set.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from core.draft_editor import DraftEditor
from core.models.preference_set import PreferenceSet

_LOG = logging.getLogger(__name__)

Persist = Callable[[PreferenceSet], Awaitable[None]]


class CommitPersistError(RuntimeError):
    """Storage rejected a commit; committed state was left as it was."""


class CommitInProgress(RuntimeError):
    """A persisted commit for this view has not finished yet."""


class CommitController:
    def commit(self, draft: DraftEditor, target: PreferenceSet) -> PreferenceSet:
        return target.model_copy(
            update={
                "likes": list(draft.pending_likes),
                "dislikes": list(draft.pending_dislikes),
            },
            deep=True,
        )

    async def commit_and_persist(
        self,
        draft: DraftEditor,
        target: PreferenceSet,
        persist: Persist,
    ) -> PreferenceSet:
        staged = self.commit(draft, target)
        try:
            await persist(staged)
        except Exception as exc:
            _LOG.error("persisting commit failed: %s", exc)
            raise CommitPersistError(str(exc)) from exc
        _LOG.info(
            "committed %d likes / %d dislikes",
            len(staged.likes),
            len(staged.dislikes),
        )
        return staged
