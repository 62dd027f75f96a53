"""
Unit tests for the session store and the conversation store.
"""

import pytest

from email_brain.models import ChatMessage, ChatRole
from email_brain.storage.conversations import ConversationStore
from email_brain.storage.sessions import SessionStore


class TestSessionStore:

    def test_created_token_resolves_to_user(self):
        sessions = SessionStore()
        token = sessions.create("user-1")

        assert sessions.resolve(token) == "user-1"

    def test_tokens_are_unique(self):
        sessions = SessionStore()
        tokens = {sessions.create("user-1") for _ in range(50)}

        assert len(tokens) == 50
        assert len(sessions) == 50

    def test_revoke_invalidates_token(self):
        sessions = SessionStore()
        token = sessions.create("user-1")

        assert sessions.revoke(token) is True
        assert sessions.resolve(token) is None
        assert sessions.revoke(token) is False

    @pytest.mark.parametrize("token", [None, "", "not-a-token"])
    def test_unknown_tokens_do_not_resolve(self, token):
        assert SessionStore().resolve(token) is None

    def test_reset_drops_all_sessions(self):
        sessions = SessionStore()
        token = sessions.create("user-1")
        sessions.reset()

        assert sessions.resolve(token) is None


class TestConversationStore:

    def test_history_is_empty_for_new_user(self):
        assert ConversationStore().history("user-1") == []

    def test_append_preserves_order(self):
        store = ConversationStore()
        store.append("user-1", ChatMessage(ChatRole.USER, "hi"))
        store.append("user-1", ChatMessage(ChatRole.ASSISTANT, "hello"))
        store.append("user-2", ChatMessage(ChatRole.USER, "other user"))

        assert store.history("user-1") == [
            ChatMessage(ChatRole.USER, "hi"),
            ChatMessage(ChatRole.ASSISTANT, "hello"),
        ]
        assert len(store.history("user-2")) == 1

    def test_history_is_a_copy(self):
        store = ConversationStore()
        store.append("user-1", ChatMessage(ChatRole.USER, "hi"))

        store.history("user-1").clear()

        assert len(store.history("user-1")) == 1

    def test_lock_is_per_user(self):
        store = ConversationStore()

        assert store.lock_for("user-1") is store.lock_for("user-1")
        assert store.lock_for("user-1") is not store.lock_for("user-2")
