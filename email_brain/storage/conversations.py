"""
Conversation store.

Append-only, per-user chat log. Creation order is the only ordering and is
what the chat engine replays to the model.
"""

import asyncio
from typing import Dict, List

from email_brain.models import ChatMessage


class ConversationStore:
    """Ordered message sequences keyed by user identifier."""

    def __init__(self):
        self._messages: Dict[str, List[ChatMessage]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def history(self, user_id: str) -> List[ChatMessage]:
        """Copy of the user's messages; empty if the user never chatted."""
        return list(self._messages.get(user_id, []))

    def append(self, user_id: str, message: ChatMessage) -> None:
        self._messages.setdefault(user_id, []).append(message)

    def lock_for(self, user_id: str) -> asyncio.Lock:
        """Exclusion token keeping a user's turns in FIFO order."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def reset(self) -> None:
        self._messages.clear()
        self._locks.clear()
