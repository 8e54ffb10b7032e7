"""
ProfileView – affordances, session states and re-render notifications.
"""
import asyncio

import pytest

from core.commit import CommitInProgress, CommitPersistError
from core.models.preference_set import PreferenceSet
from core.profile_view import ProfileView, SessionState

START = dict(
    name="John Doe",
    email="john.doe@example.com",
    likes=["Chinese", "Vegetarian"],
    dislikes=["Spicy", "Seafood"],
)


@pytest.fixture
def view() -> ProfileView:
    return ProfileView(PreferenceSet(**START), placeholder="/placeholder.png")


# ── render ───────────────────────────────────────────────────────────
def test_initial_render(view: ProfileView):
    r = view.render()
    assert r["name"] == "John Doe"
    assert r["email"] == "john.doe@example.com"
    assert r["image"] == "/placeholder.png"
    assert r["likes"] == ["Chinese", "Vegetarian"]
    assert r["state"] == "seeded"
    assert r["dirty"] is False
    assert r["notice"] is None


# ── affordances ──────────────────────────────────────────────────────
def test_add_uses_input_buffer(view: ProfileView):
    view.set_input_like("Thai")
    assert view.add_like() is True
    r = view.render()
    assert r["likes"][-1] == "Thai"
    assert r["input_like"] == ""
    assert r["state"] == "editing"
    assert r["dirty"] is True


def test_rejected_add_sets_notice_without_raising(view: ProfileView):
    view.set_input_dislike("Spicy")
    assert view.add_dislike() is False
    assert "already" in view.render()["notice"]

    view.set_input_dislike("   ")
    assert view.add_dislike() is False
    assert view.render()["notice"] == "Enter a food name first"

    # next success clears it
    view.set_input_dislike("Okra")
    assert view.add_dislike() is True
    assert view.render()["notice"] is None


def test_rejected_edit_keeps_state(view: ProfileView):
    assert view.remove_like("Pizza") is False
    assert view.state is SessionState.SEEDED


def test_abandon_leaves_committed_untouched(view: ProfileView):
    before = view.preferences
    view.set_input_like("Thai")
    view.add_like()
    view.remove_dislike("Seafood")
    view.remove_like("Chinese")

    view.abandon()

    assert view.state is SessionState.ABANDONED
    assert view.preferences is before
    assert view.preferences.likes == ["Chinese", "Vegetarian"]
    assert view.preferences.dislikes == ["Spicy", "Seafood"]
    assert view.render()["likes"] == ["Chinese", "Vegetarian"]


def test_commit_end_to_end(view: ProfileView):
    view.set_input_like("Thai")
    view.add_like()
    view.remove_dislike("Seafood")

    committed = view.commit()

    assert committed.likes == ["Chinese", "Vegetarian", "Thai"]
    assert committed.dislikes == ["Spicy"]
    assert view.state is SessionState.COMMITTED
    # draft re-seeded from the new committed set
    assert view.draft.pending_likes == committed.likes
    assert view.dirty is False


def test_new_session_after_commit(view: ProfileView):
    view.commit()
    view.set_input_like("Pho")
    assert view.add_like()
    assert view.state is SessionState.EDITING
    assert view.preferences.likes == ["Chinese", "Vegetarian"]


# ── observers ────────────────────────────────────────────────────────
def test_listeners_called_on_every_change(view: ProfileView):
    calls = []
    view.subscribe(lambda v: calls.append(v.state))

    view.set_input_like("Thai")
    view.add_like()
    view.remove_like("nope")
    view.commit()

    assert calls == [
        SessionState.SEEDED,
        SessionState.EDITING,
        SessionState.EDITING,
        SessionState.COMMITTED,
    ]


# ── image hand-off ───────────────────────────────────────────────────
def test_receive_image_keeps_draft(view: ProfileView):
    view.set_input_like("Thai")
    view.add_like()
    view.receive_image("/u/1.png")

    r = view.render()
    assert r["image"] == "/u/1.png"
    assert "Thai" in r["likes"]
    assert view.preferences.likes == ["Chinese", "Vegetarian"]


# ── persisted commit ─────────────────────────────────────────────────
def test_persist_failure_keeps_committed_and_draft(view: ProfileView):
    async def boom(prefs):
        raise RuntimeError("write failed")

    view.set_input_like("Thai")
    view.add_like()
    before = view.preferences

    with pytest.raises(CommitPersistError):
        asyncio.run(view.commit_and_persist(boom))

    assert view.preferences is before
    assert view.draft.pending_likes[-1] == "Thai"
    assert view.state is SessionState.EDITING


def test_persisted_commit_applies(view: ProfileView):
    stored = {}

    async def persist(prefs):
        stored["likes"] = prefs.likes

    view.remove_like("Chinese")
    out = asyncio.run(view.commit_and_persist(persist))
    assert stored["likes"] == ["Vegetarian"] == out.likes
    assert view.preferences is out


# ── edits while a commit is being written ────────────────────────────
def _during_commit(view: ProfileView, meanwhile):
    """Run `meanwhile(view)` while the storage write is still pending."""

    async def scenario():
        gate = asyncio.Event()

        async def persist(prefs):
            await gate.wait()

        task = asyncio.create_task(view.commit_and_persist(persist))
        await asyncio.sleep(0)
        assert view.committing is True
        result = await meanwhile(view)
        gate.set()
        await task
        return result

    return asyncio.run(scenario())


def test_list_edits_refused_until_commit_lands(view: ProfileView):
    view.remove_dislike("Seafood")

    async def meanwhile(v):
        v.set_input_like("Pho")
        return v.add_like(), v.remove_like("Chinese"), v.render()["notice"]

    added, removed, notice = _during_commit(view, meanwhile)

    assert (added, removed) == (False, False)
    assert notice.startswith("Saving")
    assert view.committing is False
    assert view.preferences.likes == ["Chinese", "Vegetarian"]
    assert view.preferences.dislikes == ["Spicy"]
    assert view.draft.pending_likes == view.preferences.likes
    # typed text survives and can be added once the save is done
    assert view.draft.input_like == "Pho"
    assert view.add_like() is True


def test_image_received_mid_commit_survives(view: ProfileView):
    view.remove_like("Chinese")

    async def meanwhile(v):
        v.receive_image("/u/1.png")

    _during_commit(view, meanwhile)

    assert view.render()["image"] == "/u/1.png"
    assert view.preferences.likes == ["Vegetarian"]


def test_second_commit_rejected_while_first_in_flight(view: ProfileView):
    async def meanwhile(v):
        async def never_called(prefs):
            raise AssertionError("second write should not start")

        with pytest.raises(CommitInProgress):
            await v.commit_and_persist(never_called)
        with pytest.raises(CommitInProgress):
            v.commit()
        with pytest.raises(CommitInProgress):
            v.abandon()

    _during_commit(view, meanwhile)
    assert view.state is SessionState.COMMITTED
