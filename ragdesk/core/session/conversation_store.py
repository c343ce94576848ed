"""
Per-session conversation store.

Bounded in-memory chat history keyed by a caller-supplied session id.

Dependencies: asyncio
System role: Conversation context for chat and RAG chat
"""

import asyncio
import logging

from ragdesk.core.exceptions import ValidationError
from ragdesk.models.chat import ConversationRole, ConversationTurn

logger = logging.getLogger(__name__)


def group_rounds(turns: list[ConversationTurn]) -> list[list[ConversationTurn]]:
    """
    Group turns into rounds.

    A user turn opens a round and the assistant turn right after it closes
    it. A user turn that was never answered is a round of its own.
    """
    rounds: list[list[ConversationTurn]] = []
    for turn in turns:
        if (
            turn.role is ConversationRole.ASSISTANT
            and rounds
            and len(rounds[-1]) == 1
            and rounds[-1][0].role is ConversationRole.USER
        ):
            rounds[-1].append(turn)
        else:
            rounds.append([turn])
    return rounds


class ConversationStore:
    """
    Chat history per session, bounded to ``max_history_rounds`` rounds.

    Each session has its own ``asyncio.Lock`` so turns of one conversation
    can be serialized while other sessions proceed.
    """

    def __init__(self, max_history_rounds: int = 10) -> None:
        """
        Initialize an empty store.

        Args:
            max_history_rounds: Rounds kept per session after truncation
        """
        if max_history_rounds < 1:
            raise ValidationError("max_history_rounds must be at least 1", field="max_history_rounds")
        self.max_history_rounds = max_history_rounds
        self._histories: dict[str, list[ConversationTurn]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def max_turns(self) -> int:
        return 2 * self.max_history_rounds

    @staticmethod
    def _check_session(session_id: str) -> None:
        if not session_id or not session_id.strip():
            raise ValidationError("session_id must not be empty", field="session_id")

    def _append(self, session_id: str, role: ConversationRole, content: str) -> None:
        self._check_session(session_id)
        self._histories.setdefault(session_id, []).append(ConversationTurn(role=role, content=content))

    def append_user(self, session_id: str, content: str) -> None:
        """Record a user turn."""
        self._append(session_id, ConversationRole.USER, content)

    def append_assistant(self, session_id: str, content: str) -> None:
        """Record an assistant turn."""
        self._append(session_id, ConversationRole.ASSISTANT, content)

    def current_history(self, session_id: str) -> list[ConversationTurn]:
        """Return a copy of the session's turns, oldest first."""
        self._check_session(session_id)
        return list(self._histories.get(session_id, []))

    def truncate(self, session_id: str) -> int:
        """
        Evict whole rounds from the oldest end until the bound holds.

        The last round is kept when it is still waiting for its answer.

        Returns:
            int: Number of turns evicted
        """
        self._check_session(session_id)
        turns = self._histories.get(session_id, [])
        if len(turns) <= self.max_turns:
            return 0

        rounds = group_rounds(turns)
        protected = 1 if turns[-1].role is ConversationRole.USER else 0
        size = len(turns)
        evict_rounds = 0
        while size > self.max_turns and evict_rounds < len(rounds) - protected:
            size -= len(rounds[evict_rounds])
            evict_rounds += 1

        evicted = len(turns) - size
        self._histories[session_id] = turns[evicted:]
        logger.debug(f"{__name__}:truncate - session_id={session_id} evicted {evicted} turns")
        return evicted

    def sessions(self) -> list[str]:
        """Ids of sessions with recorded turns."""
        return [sid for sid, turns in self._histories.items() if turns]

    def clear(self, session_id: str) -> None:
        """Forget a session's history."""
        self._check_session(session_id)
        self._histories.pop(session_id, None)
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]
        logger.info(f"{__name__}:clear - session_id={session_id}")

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serializing turns of one conversation."""
        self._check_session(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())
