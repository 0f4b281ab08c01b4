"""Tests for review_core/store.py."""

from datetime import datetime, timedelta

import pytest

from review_core.errors import NotFound
from review_core.models import AISuggestion, DebateSession, DebateStatus, IssueType, SessionRecord, Severity
from review_core.store import InMemoryDebateStore, InMemorySessionStore, InMemorySnippetStore


def test_snippet_store_round_trip(sample_snippet):
    store = InMemorySnippetStore()
    store.add(sample_snippet)
    assert store.get("snippet-1") is sample_snippet


def test_snippet_store_missing():
    with pytest.raises(NotFound, match="Code snippet not found: nope"):
        InMemorySnippetStore().get("nope")


def test_session_store_sets_suggestions():
    store = InMemorySessionStore()
    store.add(SessionRecord(id="s1"))
    suggestion = AISuggestion(IssueType.BUG, Severity.LOW, 1, 1, "t", "d", 0.5)

    store.set_suggestions("s1", [suggestion])

    assert store.get("s1").suggestions == [suggestion]


def test_session_store_missing_session():
    with pytest.raises(NotFound):
        InMemorySessionStore().set_suggestions("ghost", [])


def test_debate_store_find_active_for_change():
    store = InMemoryDebateStore()
    closed = DebateSession("t", "c", session_id="s1", code_change_id="ch", status=DebateStatus.CONCLUDED)
    live = DebateSession("t", "c", session_id="s1", code_change_id="ch")
    store.save(closed)
    store.save(live)

    assert store.find_active_for_change("s1", "ch") is live
    assert store.find_active_for_change("s2", "ch") is None
    assert len(store.find("s1")) == 2


def test_debate_store_drops_expired_debates():
    store = InMemoryDebateStore()
    stale = DebateSession(
        "t", "c", session_id="s1", code_change_id="ch", expires_at=datetime.now() - timedelta(seconds=1),
    )
    fresh = DebateSession("t", "c", session_id="s1", expires_at=datetime.now() + timedelta(days=7))
    store.save(stale)
    store.save(fresh)

    assert store.find_active_for_change("s1", "ch") is None
    assert store.find("s1") == [fresh]
    with pytest.raises(NotFound):
        store.get(stale.id)
    assert stale.id not in store._debates
