"""
core/draft_editor.py
────────────────────────────────────────────────────────────────────────
Staged editing of the two food lists.

A `DraftEditor` is a disposable working copy of a `PreferenceSet`'s
`likes` / `dislikes`.  Nothing done here touches the committed set; that
only happens through `core.commit.CommitController`.

Both pending lists hold no duplicates (exact string match) and no blank
entries at any time.  Input buffers are free text and are only validated
when an add is attempted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from core.models.preference_set import PreferenceSet

_LOG = logging.getLogger(__name__)


class DraftEditor:
    def __init__(self, source: PreferenceSet | None = None) -> None:
        self.pending_likes: List[str] = []
        self.pending_dislikes: List[str] = []
        self.input_like: str = ""
        self.input_dislike: str = ""
        if source is not None:
            self.reset(source)

    @classmethod
    def from_preferences(cls, source: PreferenceSet) -> DraftEditor:
        return cls(source)

    # ─────────────────────────────── seed ─────────────────────────── #
    def reset(self, source: PreferenceSet) -> None:
        """Throw away pending edits and copy the lists of `source` again."""
        self.pending_likes = list(source.likes)
        self.pending_dislikes = list(source.dislikes)
        self.input_like = ""
        self.input_dislike = ""

    # ─────────────────────────────── input ────────────────────────── #
    def set_input_like(self, text: str) -> None:
        self.input_like = text

    def set_input_dislike(self, text: str) -> None:
        self.input_dislike = text

    # ──────────────────────────── add / remove ────────────────────── #
    def add_like(self, candidate: str) -> bool:
        if not _append_unique(self.pending_likes, candidate):
            return False
        self.input_like = ""
        return True

    def add_dislike(self, candidate: str) -> bool:
        if not _append_unique(self.pending_dislikes, candidate):
            return False
        self.input_dislike = ""
        return True

    def remove_like(self, name: str) -> bool:
        return _remove_first(self.pending_likes, name)

    def remove_dislike(self, name: str) -> bool:
        return _remove_first(self.pending_dislikes, name)

    # ──────────────────────────── inspection ──────────────────────── #
    def is_dirty(self, source: PreferenceSet) -> bool:
        return (
            self.pending_likes != source.likes
            or self.pending_dislikes != source.dislikes
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "likes": list(self.pending_likes),
            "dislikes": list(self.pending_dislikes),
            "input_like": self.input_like,
            "input_dislike": self.input_dislike,
        }


# ─────────────────── Helpers ───────────────────

def _append_unique(items: List[str], candidate: str) -> bool:
    name = candidate.strip()
    if not name:
        _LOG.debug("rejecting blank entry")
        return False
    if name in items:
        _LOG.debug("rejecting duplicate entry %r", name)
        return False
    items.append(name)
    return True


def _remove_first(items: List[str], name: str) -> bool:
    try:
        items.remove(name)
    except ValueError:
        _LOG.debug("nothing to remove for %r", name)
        return False
    return True
