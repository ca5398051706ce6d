"""Generation session segment and history management."""

from pathlib import Path

import pytest

from logic.outfit_builder import GenerationHistory
from memory.generation_sessions import (
    GenerationSessionManager,
    InMemorySessionStore,
    JSONSessionStore,
    UnknownSessionError,
    build_session_store,
)
from models.occasion import resolve_occasion
from models.taxonomy import Segment


def test_segment_change_clears_history() -> None:
    manager = GenerationSessionManager(InMemorySessionStore())
    session = manager.start_session("user-1", "female")
    assert session.segment == "Female"

    manager.record_outfit(session.session_id, "t1|b1|*")
    manager.record_outfit(session.session_id, "t1|b1|*")
    assert manager.get_session(session.session_id).history == ["t1|b1|*"]

    unchanged = manager.set_segment(session.session_id, Segment.FEMALE)
    assert unchanged.history == ["t1|b1|*"]

    switched = manager.set_segment(session.session_id, "Kids")
    assert switched.segment == "Kids"
    assert switched.history == []


def test_refresh_clears_history_and_context_reflects_state() -> None:
    manager = GenerationSessionManager()
    session = manager.start_session("user-1", Segment.MALE)
    manager.record_outfit(session.session_id, "a-b-c")

    context = manager.get_context(session.session_id, resolve_occasion("work", []))
    assert context.segment is Segment.MALE
    assert "a-b-c" in context.history
    assert context.occasion.occasion_id == "work"

    manager.refresh(session.session_id)
    assert len(manager.get_context(session.session_id).history) == 0


def test_save_history_persists_cleared_history() -> None:
    manager = GenerationSessionManager()
    session = manager.start_session("user-1")
    manager.record_outfit(session.session_id, "x-y-z")

    manager.save_history(session.session_id, GenerationHistory(["b", "a"]))

    assert manager.get_session(session.session_id).history == ["a", "b"]


def test_in_memory_store_returns_copies() -> None:
    manager = GenerationSessionManager()
    session = manager.start_session("user-1")
    loaded = manager.get_session(session.session_id)
    loaded.history.append("leak")

    assert manager.get_session(session.session_id).history == []


def test_json_store_survives_new_manager(tmp_path: Path) -> None:
    first = GenerationSessionManager(JSONSessionStore(tmp_path))
    session = first.start_session("user-1", "Unisex")
    first.record_outfit(session.session_id, "t-b-s")

    assert JSONSessionStore(tmp_path).exists(session.session_id)
    assert not JSONSessionStore(tmp_path).exists("missing")

    second = GenerationSessionManager(JSONSessionStore(tmp_path))
    restored = second.get_session(session.session_id)

    assert restored.segment == "Unisex"
    assert restored.history == ["t-b-s"]


def test_unknown_sessions_and_segments() -> None:
    manager = GenerationSessionManager()
    with pytest.raises(UnknownSessionError):
        manager.get_session("missing")
    with pytest.raises(KeyError):
        manager.refresh("missing")

    session = manager.start_session("user-1")
    with pytest.raises(ValueError):
        manager.set_segment(session.session_id, "martians")


def test_build_session_store_backends(tmp_path: Path) -> None:
    assert isinstance(build_session_store("memory"), InMemorySessionStore)
    assert isinstance(build_session_store("json", str(tmp_path)), JSONSessionStore)
    with pytest.raises(ValueError):
        build_session_store("redis")
