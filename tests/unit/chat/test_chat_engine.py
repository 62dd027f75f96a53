"""
Unit tests for the chat engine.

Tests cover:
- Composition of the new turn from system instruction and utterance
- Replay of stored history with role mapping
- Recording of complete user/assistant pairs only on success
"""

import asyncio

import pytest

from email_brain.chat.engine import ChatEngine
from email_brain.errors import ModelFailure
from email_brain.integrations.base import TextGenerator
from email_brain.models import ChatMessage, ChatRole
from email_brain.storage.conversations import ConversationStore

SUMMARY = 'User has 3 emails. 2 unread. Categories: {"Uncategorized":3}'


@pytest.fixture
def conversations():
    return ConversationStore()


@pytest.fixture
def chat_engine(generator, conversations):
    return ChatEngine(generator, conversations)


class TestChatEngine:

    def test_system_instruction_embeds_summary(self, chat_engine):
        instruction = chat_engine.system_instruction(SUMMARY)

        assert instruction.startswith(f"You are an intelligent email assistant. {SUMMARY}. ")
        assert "Help the user manage their inbox" in instruction

    def test_build_turns_maps_roles(self, chat_engine):
        history = [ChatMessage(ChatRole.USER, "hi"), ChatMessage(ChatRole.ASSISTANT, "hello")]

        assert chat_engine.build_turns(history) == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]

    @pytest.mark.asyncio
    async def test_successful_turn_records_pair(self, chat_engine, generator, conversations):
        generator.queue("You have 2 unread emails.")

        reply = await chat_engine.respond("user-1", "How many unread?", SUMMARY)

        assert reply == "You have 2 unread emails."
        assert conversations.history("user-1") == [
            ChatMessage(ChatRole.USER, "How many unread?"),
            ChatMessage(ChatRole.ASSISTANT, "You have 2 unread emails."),
        ]

    @pytest.mark.asyncio
    async def test_new_turn_and_options(self, chat_engine, generator):
        generator.queue("Sure.")

        await chat_engine.respond("user-1", "Summarize my inbox", SUMMARY)

        call = generator.conversations[0]
        assert call["prior_turns"] == []
        assert call["new_turn"] == f"{chat_engine.system_instruction(SUMMARY)}\n\nUser: Summarize my inbox"
        assert call["options"] == {"max_tokens": 1000}

    @pytest.mark.asyncio
    async def test_history_is_replayed_in_order(self, chat_engine, generator, conversations):
        generator.queue("first answer", "second answer")

        await chat_engine.respond("user-1", "first question", SUMMARY)
        await chat_engine.respond("user-1", "second question", SUMMARY)

        assert generator.conversations[1]["prior_turns"] == [
            {"role": "user", "content": "first question"},
            {"role": "assistant", "content": "first answer"},
        ]
        assert [m.content for m in conversations.history("user-1")] == [
            "first question", "first answer", "second question", "second answer",
        ]

    @pytest.mark.asyncio
    async def test_failure_records_nothing(self, chat_engine, generator, conversations):
        generator.queue("ok")
        await chat_engine.respond("user-1", "hello", SUMMARY)
        generator.queue(ModelFailure("rate limited"))

        with pytest.raises(ModelFailure):
            await chat_engine.respond("user-1", "are you there?", SUMMARY)

        assert len(conversations.history("user-1")) == 2

    @pytest.mark.asyncio
    async def test_explicit_history_overrides_store(self, chat_engine, generator):
        generator.queue("ok")
        history = [ChatMessage(ChatRole.USER, "earlier"), ChatMessage(ChatRole.ASSISTANT, "noted")]

        await chat_engine.respond("user-1", "now", SUMMARY, history=history)

        assert len(generator.conversations[0]["prior_turns"]) == 2

    @pytest.mark.asyncio
    async def test_conversations_are_per_user(self, chat_engine, generator, conversations):
        generator.queue("a", "b")

        await chat_engine.respond("user-1", "q1", SUMMARY)
        await chat_engine.respond("user-2", "q2", SUMMARY)

        assert generator.conversations[1]["prior_turns"] == []
        assert len(conversations.history("user-2")) == 2

    @pytest.mark.asyncio
    async def test_custom_max_tokens(self, generator, conversations):
        engine = ChatEngine(generator, conversations, max_tokens=256)
        generator.queue("ok")

        await engine.respond("user-1", "hi", SUMMARY)

        assert generator.conversations[0]["options"]["max_tokens"] == 256


class GatedConverser(TextGenerator):
    """Generator whose first dialogue call blocks until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = []

    async def converse(self, prior_turns, new_turn, **options) -> str:
        self.calls.append(prior_turns)
        utterance = new_turn.rsplit("User: ", 1)[-1]
        if len(self.calls) == 1:
            self.started.set()
            await self.release.wait()
        return f"reply-{utterance}"


class TestChatOrdering:

    @pytest.mark.asyncio
    async def test_same_user_turns_are_recorded_in_request_order(self, conversations):
        gated = GatedConverser()
        chat_engine = ChatEngine(gated, conversations)

        first = asyncio.create_task(chat_engine.respond("user-1", "one", SUMMARY))
        await gated.started.wait()
        second = asyncio.create_task(chat_engine.respond("user-1", "two", SUMMARY))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        # The second turn waits on the user lock without calling the model
        assert len(gated.calls) == 1

        gated.release.set()
        assert await asyncio.gather(first, second) == ["reply-one", "reply-two"]

        assert [m.content for m in conversations.history("user-1")] == [
            "one", "reply-one", "two", "reply-two",
        ]
        # The second turn saw the completed first exchange
        assert gated.calls[1] == [
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "reply-one"},
        ]

    @pytest.mark.asyncio
    async def test_other_users_are_not_blocked(self, conversations):
        gated = GatedConverser()
        chat_engine = ChatEngine(gated, conversations)

        first = asyncio.create_task(chat_engine.respond("user-1", "one", SUMMARY))
        await gated.started.wait()

        reply = await asyncio.wait_for(chat_engine.respond("user-2", "hi", SUMMARY), timeout=1)

        assert reply == "reply-hi"
        assert not first.done()
        gated.release.set()
        await first
