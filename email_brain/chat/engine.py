"""
Chat Engine

Composes the mailbox context summary, the stored dialogue and a new user
utterance into a single model call, and records the exchange.

Design Considerations:
- The conversation store only ever holds complete user/assistant pairs
- A failed model call leaves the store untouched
- Turns for one user are serialized so stored order matches request order
"""

import logging
from typing import Dict, List, Optional

from email_brain.config.engine_config import ENGINE_CONFIG
from email_brain.errors import ModelFailure
from email_brain.integrations.base import TextGenerator
from email_brain.models import ChatMessage, ChatRole
from email_brain.storage.conversations import ConversationStore

logger = logging.getLogger(__name__)

# Stored role -> role understood by the model API
MODEL_ROLES = {
    ChatRole.USER: "user",
    ChatRole.ASSISTANT: "assistant",
}


class ChatEngine:
    """Mailbox-aware conversational assistant."""

    def __init__(
        self,
        generator: TextGenerator,
        conversations: ConversationStore,
        max_tokens: Optional[int] = None
    ):
        self.generator = generator
        self.conversations = conversations
        self.max_tokens = max_tokens or ENGINE_CONFIG["chat"]["max_tokens"]
        self.system_template = ENGINE_CONFIG["chat"]["system_instruction"]

    def system_instruction(self, context_summary: str) -> str:
        return self.system_template.format(summary=context_summary)

    def build_turns(self, history: List[ChatMessage]) -> List[Dict[str, str]]:
        """Replay stored messages, in stored order, as model-visible turns."""
        return [{"role": MODEL_ROLES[m.role], "content": m.content} for m in history]

    async def respond(
        self,
        user_id: str,
        utterance: str,
        context_summary: str,
        history: Optional[List[ChatMessage]] = None
    ) -> str:
        """
        Answer ``utterance`` and record the exchange.

        Args:
            user_id: Conversation owner
            utterance: New user message
            context_summary: Mailbox summary from ChatContextBuilder
            history: Prior messages; read from the conversation store when omitted

        Returns:
            The model's reply text

        Raises:
            ModelFailure: If the model call fails; nothing is recorded
        """
        async with self.conversations.lock_for(user_id):
            if history is None:
                history = self.conversations.history(user_id)

            new_turn = f"{self.system_instruction(context_summary)}\n\nUser: {utterance}"
            logger.debug(f"Chat turn for user {user_id} with {len(history)} prior messages")

            try:
                reply = await self.generator.converse(
                    self.build_turns(history),
                    new_turn,
                    max_tokens=self.max_tokens
                )
            except ModelFailure as e:
                logger.error(f"Chat failed for user {user_id}: {e.message}")
                raise

            self.conversations.append(user_id, ChatMessage(ChatRole.USER, utterance))
            self.conversations.append(user_id, ChatMessage(ChatRole.ASSISTANT, reply))
            logger.info(f"Chat turn recorded for user {user_id}")
            return reply
