"""
Engine Container

Owns every piece of process-lifetime state (sessions, overlays, prompt
catalog, conversations) together with the components that operate on it,
and exposes the user-scoped operations the transport layer calls.

Design Considerations:
- State containers are created here and injected into components rather
  than reached as module globals
- Every operation is scoped to an authenticated user id; emails and prompts
  owned by someone else are reported as not found
- reset() returns the engine to its freshly loaded state for tests
"""

import logging
from typing import List, Optional, Tuple

from email_brain.chat.context import ChatContextBuilder
from email_brain.chat.engine import ChatEngine
from email_brain.enrichment.pipeline import EnrichmentPipeline
from email_brain.errors import NotFound, Unauthenticated
from email_brain.integrations.base import TextGenerator
from email_brain.models import AnnotationResult, ChatMessage, Dataset, Email, MergedEmail, PromptTemplate, User
from email_brain.storage.conversations import ConversationStore
from email_brain.storage.overlays import EmailOverlayStore
from email_brain.storage.prompts import PromptCatalog
from email_brain.storage.sessions import SessionStore

logger = logging.getLogger(__name__)


def mask_email(email: str) -> str:
    """Mask an address for logging, keeping first/last character of the local part."""
    if not email or '@' not in email:
        return email
    username, domain = email.split('@', 1)
    if len(username) <= 2:
        return f"{'*' * len(username)}@{domain}"
    return f"{username[0]}{'*' * (len(username) - 2)}{username[-1]}@{domain}"


class EmailBrainEngine:
    """Enrichment and context engine bound to one dataset and one text generator."""

    def __init__(self, dataset: Dataset, generator: TextGenerator, chat_max_tokens: Optional[int] = None):
        self.dataset = dataset
        self.generator = generator

        self.sessions = SessionStore()
        self.overlays = EmailOverlayStore()
        self.prompts = PromptCatalog(dataset.prompts)
        self.conversations = ConversationStore()

        self.pipeline = EnrichmentPipeline(generator, self.prompts, self.overlays)
        self.context_builder = ChatContextBuilder()
        self.chat_engine = ChatEngine(generator, self.conversations, max_tokens=chat_max_tokens)

        logger.info("Email brain engine initialized")

    # Authentication

    def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and open a session.

        Raises:
            Unauthenticated: If no user matches the email/password pair
        """
        user = next(
            (u for u in self.dataset.users if u.email == email and u.password == password),
            None
        )
        if user is None:
            logger.warning(f"Failed login attempt for {mask_email(email)}")
            raise Unauthenticated("Invalid credentials")

        token = self.sessions.create(user.id)
        logger.info(f"User {user.id} logged in")
        return user, token

    def user_for_token(self, token: Optional[str]) -> User:
        """
        Raises:
            Unauthenticated: If the token is missing, unknown or revoked, or
                its user no longer exists
        """
        user_id = self.sessions.resolve(token)
        if user_id is None:
            raise Unauthenticated("Not authenticated")
        user = self.dataset.find_user_by_id(user_id)
        if user is None:
            raise Unauthenticated("User not found")
        return user

    def logout(self, token: Optional[str]) -> bool:
        return self.sessions.revoke(token)

    # Emails

    def _owned_email(self, user_id: str, email_id: str) -> Email:
        email = next(
            (e for e in self.dataset.emails if e.id == email_id and e.user_id == user_id),
            None
        )
        if email is None:
            raise NotFound("Email not found", details={"email_id": email_id})
        return email

    def list_emails(self, user_id: str, category: Optional[str] = None) -> List[MergedEmail]:
        """Merged views of the user's emails, newest first, optionally filtered by category."""
        emails = [self.overlays.get_merged(e) for e in self.dataset.emails_for(user_id)]
        if category and category != "all":
            emails = [e for e in emails if e.category == category]
        return sorted(emails, key=lambda e: e.received_at, reverse=True)

    def get_email(self, user_id: str, email_id: str) -> MergedEmail:
        return self.overlays.get_merged(self._owned_email(user_id, email_id))

    def mark_read(self, user_id: str, email_id: str) -> None:
        self._owned_email(user_id, email_id)
        self.overlays.mark_read(email_id)

    async def process_email(self, user_id: str, email_id: str) -> AnnotationResult:
        email = self._owned_email(user_id, email_id)
        return await self.pipeline.process(email)

    # Prompts

    def list_prompts(self, user_id: str) -> List[PromptTemplate]:
        return self.prompts.list_for(user_id)

    def update_prompt(
        self,
        user_id: str,
        prompt_id: str,
        name: Optional[str] = None,
        content: Optional[str] = None
    ) -> PromptTemplate:
        return self.prompts.update(prompt_id, user_id, name=name, content=content)

    # Chat

    def context_summary(self, user_id: str) -> str:
        return self.context_builder.summarize(user_id, self.dataset.emails, self.overlays)

    async def chat(self, user_id: str, message: str) -> str:
        summary = self.context_summary(user_id)
        return await self.chat_engine.respond(user_id, message, summary)

    def chat_history(self, user_id: str) -> List[ChatMessage]:
        return self.conversations.history(user_id)

    def reset(self) -> None:
        """Drop all sessions, overlays, conversations and prompt edits."""
        self.sessions.reset()
        self.overlays.reset()
        self.prompts.reset()
        self.conversations.reset()
        logger.info("Email brain engine state reset")
