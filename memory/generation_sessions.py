"""Per-session segment selection and outfit generation history."""
from __future__ import annotations

import json
import threading
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
from uuid import uuid4

from logic.outfit_builder import GenerationContext, GenerationHistory
from models.occasion import OccasionContext
from models.taxonomy import Segment, validate_segment


class UnknownSessionError(KeyError):
    """Raised when a session id does not exist."""


@dataclass
class GenerationSession:
    session_id: str
    user_id: str
    segment: str = Segment.ALL.value
    history: List[str] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)


class SessionStore:
    """Interface for generation session persistence."""

    def load(self, session_id: str) -> GenerationSession:
        raise NotImplementedError

    def save(self, session: GenerationSession) -> None:
        raise NotImplementedError

    def exists(self, session_id: str) -> bool:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._sessions: Dict[str, GenerationSession] = {}

    def load(self, session_id: str) -> GenerationSession:
        try:
            stored = self._sessions[session_id]
        except KeyError:
            raise UnknownSessionError(session_id) from None
        return GenerationSession(**{**asdict(stored), "history": list(stored.history)})

    def save(self, session: GenerationSession) -> None:
        self._sessions[session.session_id] = GenerationSession(
            **{**asdict(session), "history": list(session.history)}
        )

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions


class JSONSessionStore(SessionStore):
    """JSON-file-backed store suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/sessions") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        return self.base_dir / f"{session_id}.json"

    def load(self, session_id: str) -> GenerationSession:
        path = self._path(session_id)
        if not path.exists():
            raise UnknownSessionError(session_id)
        return GenerationSession(**json.loads(path.read_text()))

    def save(self, session: GenerationSession) -> None:
        self._path(session.session_id).write_text(json.dumps(asdict(session), indent=2))

    def exists(self, session_id: str) -> bool:
        return self._path(session_id).exists()


class GenerationSessionManager:
    """Owns each session's segment and generation history.

    The history is cleared when the segment changes and on explicit refresh;
    winning outfits are recorded with :meth:`record_outfit`.
    """

    def __init__(self, store: SessionStore | None = None) -> None:
        self.store = store or InMemorySessionStore()
        self._lock = threading.Lock()

    def start_session(self, user_id: str, segment: Segment | str = Segment.ALL) -> GenerationSession:
        session = GenerationSession(
            session_id=str(uuid4()), user_id=user_id, segment=validate_segment(segment).value
        )
        with self._lock:
            self.store.save(session)
        return session

    def get_session(self, session_id: str) -> GenerationSession:
        with self._lock:
            return self.store.load(session_id)

    def get_context(self, session_id: str, occasion: Optional[OccasionContext] = None) -> GenerationContext:
        """Build a generation context from the stored segment and history."""

        session = self.get_session(session_id)
        return GenerationContext(
            segment=Segment(session.segment),
            occasion=occasion,
            history=GenerationHistory(session.history),
        )

    def set_segment(self, session_id: str, segment: Segment | str) -> GenerationSession:
        key = validate_segment(segment)
        with self._lock:
            session = self.store.load(session_id)
            if session.segment != key.value:
                session.segment = key.value
                session.history = []
            session.updated_at = time.time()
            self.store.save(session)
        return session

    def refresh(self, session_id: str) -> GenerationSession:
        with self._lock:
            session = self.store.load(session_id)
            session.history = []
            session.updated_at = time.time()
            self.store.save(session)
        return session

    def save_history(self, session_id: str, history: GenerationHistory) -> GenerationSession:
        """Persist a history the search may have cleared while exhausting combinations."""

        with self._lock:
            session = self.store.load(session_id)
            session.history = history.signatures()
            session.updated_at = time.time()
            self.store.save(session)
        return session

    def record_outfit(self, session_id: str, signature: str) -> GenerationSession:
        with self._lock:
            session = self.store.load(session_id)
            if signature not in session.history:
                session.history.append(signature)
            session.updated_at = time.time()
            self.store.save(session)
        return session


def build_session_store(backend: str, path: str | None = None) -> SessionStore:
    if backend == "json":
        return JSONSessionStore(path or "data/sessions")
    if backend == "memory":
        return InMemorySessionStore()
    raise ValueError(f"Unsupported session store backend: {backend}")


__all__ = [
    "GenerationSession",
    "GenerationSessionManager",
    "InMemorySessionStore",
    "JSONSessionStore",
    "SessionStore",
    "UnknownSessionError",
    "build_session_store",
]
