import pytest

from core.models.preference_set import PreferenceSet
from services.sessions import SessionNotFound, SessionRegistry

PREFS = PreferenceSet(name="A", email="a@example.com", likes=["Thai"])


def test_open_get_close():
    reg = SessionRegistry(max_open=10, placeholder="/p.png")
    s = reg.open(1, PREFS)
    assert reg.get(s.session_id) is s
    assert s.view.render()["image"] == "/p.png"
    reg.close(s.session_id)
    with pytest.raises(SessionNotFound):
        reg.get(s.session_id)
    with pytest.raises(SessionNotFound):
        reg.close(s.session_id)


def test_sessions_do_not_share_drafts():
    reg = SessionRegistry(max_open=10)
    a, b = reg.open(1, PREFS), reg.open(1, PREFS)
    a.view.set_input_like("Pho")
    a.view.add_like()
    assert b.view.render()["likes"] == ["Thai"]
    assert len(reg.sessions_for(1)) == 2
    assert reg.sessions_for(2) == []


def test_oldest_session_evicted():
    reg = SessionRegistry(max_open=2)
    first = reg.open(1, PREFS)
    reg.open(2, PREFS)
    reg.open(3, PREFS)
    assert len(reg) == 2
    with pytest.raises(SessionNotFound):
        reg.get(first.session_id)


def test_eviction_spares_drafts_with_unsaved_edits():
    reg = SessionRegistry(max_open=2)
    editing = reg.open(1, PREFS)
    editing.view.set_input_like("Pho")
    editing.view.add_like()
    finished = reg.open(2, PREFS)
    finished.view.commit()

    reg.open(3, PREFS)

    assert reg.get(editing.session_id) is editing
    with pytest.raises(SessionNotFound):
        reg.get(finished.session_id)


def test_all_editing_falls_back_to_oldest():
    reg = SessionRegistry(max_open=2)
    first, second = reg.open(1, PREFS), reg.open(2, PREFS)
    for s in (first, second):
        s.view.set_input_like("Pho")
        s.view.add_like()

    reg.open(3, PREFS)

    assert reg.get(second.session_id) is second
    with pytest.raises(SessionNotFound):
        reg.get(first.session_id)


def test_explicit_zero_limit_is_respected():
    reg = SessionRegistry(max_open=0)
    first = reg.open(1, PREFS)
    second = reg.open(2, PREFS)
    assert len(reg) == 1
    assert reg.get(second.session_id) is second
    with pytest.raises(SessionNotFound):
        reg.get(first.session_id)
