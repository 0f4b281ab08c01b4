"""Collaborator store interfaces and their in-memory implementations.

Writes are last-writer-wins. Nothing here locks: callers that mutate the
same debate from concurrent requests must coordinate themselves.
"""

import logging
from datetime import datetime
from typing import Protocol

from review_core.errors import NotFound
from review_core.models import AISuggestion, CodeSnippet, DebateSession, DebateStatus, SessionRecord

logger = logging.getLogger(__name__)


class CodeSnippetStore(Protocol):
    def get(self, snippet_id: str) -> CodeSnippet: ...


class SessionStore(Protocol):
    def get(self, session_id: str) -> SessionRecord: ...

    def set_suggestions(self, session_id: str, suggestions: list[AISuggestion]) -> None: ...


class DebateStore(Protocol):
    def get(self, debate_id: str) -> DebateSession: ...

    def save(self, debate: DebateSession) -> None: ...

    def find(self, session_id: str) -> list[DebateSession]: ...

    def find_active_for_change(self, session_id: str, code_change_id: str) -> DebateSession | None: ...


class InMemorySnippetStore:
    def __init__(self) -> None:
        self._snippets: dict[str, CodeSnippet] = {}

    def add(self, snippet: CodeSnippet) -> CodeSnippet:
        self._snippets[snippet.id] = snippet
        return snippet

    def get(self, snippet_id: str) -> CodeSnippet:
        try:
            return self._snippets[snippet_id]
        except KeyError:
            raise NotFound("Code snippet", snippet_id) from None


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}

    def add(self, session: SessionRecord) -> SessionRecord:
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> SessionRecord:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise NotFound("Session", session_id) from None

    def set_suggestions(self, session_id: str, suggestions: list[AISuggestion]) -> None:
        self.get(session_id).suggestions = list(suggestions)


class InMemoryDebateStore:
    """Debates past their ``expires_at`` are dropped on the next read."""

    def __init__(self) -> None:
        self._debates: dict[str, DebateSession] = {}

    def _purge_expired(self) -> None:
        now = datetime.now()
        expired = [k for k, d in self._debates.items() if d.expires_at is not None and d.expires_at < now]
        for debate_id in expired:
            del self._debates[debate_id]
        if expired:
            logger.debug("Dropped %d expired debate(s)", len(expired))

    def get(self, debate_id: str) -> DebateSession:
        self._purge_expired()
        try:
            return self._debates[debate_id]
        except KeyError:
            raise NotFound("Debate session", debate_id) from None

    def save(self, debate: DebateSession) -> None:
        self._debates[debate.id] = debate

    def find(self, session_id: str) -> list[DebateSession]:
        self._purge_expired()
        return [d for d in self._debates.values() if d.session_id == session_id]

    def find_active_for_change(self, session_id: str, code_change_id: str) -> DebateSession | None:
        self._purge_expired()
        for debate in self._debates.values():
            if (
                debate.session_id == session_id
                and debate.code_change_id == code_change_id
                and debate.status is DebateStatus.ACTIVE
            ):
                return debate
        return None
