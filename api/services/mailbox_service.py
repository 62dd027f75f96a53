"""
Mailbox Service Implementation

Bridges the API routes and the enrichment and context engine: builds the
process-wide engine from settings and converts engine records into API
response models.

Design Considerations:
- Clean separation from route handling
- Engine errors propagate unchanged to the registered exception handlers
- One engine per process, replaceable through dependency overrides in tests
"""

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends

from api.config import get_settings
from api.models.chat import ChatMessageView
from api.models.emails import ActionItemModel, AnnotationResponse, EmailView
from api.models.prompts import PromptView
from email_brain.engine import EmailBrainEngine
from email_brain.integrations.groq.client import GroqTextGenerator
from email_brain.models import AnnotationResult, MergedEmail, PromptTemplate
from email_brain.storage.dataset import load_dataset

# Configure logging
logger = logging.getLogger(__name__)


@lru_cache()
def get_engine() -> EmailBrainEngine:
    """
    Build the process-wide engine from settings.

    Loads the dataset and configures the Groq text generator once; state
    lives until the process exits.
    """
    settings = get_settings()
    dataset = load_dataset(settings.DATASET_PATH)
    generator = GroqTextGenerator(
        api_key=settings.GROQ_API_KEY.get_secret_value() if settings.GROQ_API_KEY else None,
        model=settings.MODEL_NAME,
        temperature=settings.MODEL_TEMPERATURE,
        timeout=settings.MODEL_TIMEOUT_SECONDS
    )
    return EmailBrainEngine(dataset, generator, chat_max_tokens=settings.CHAT_MAX_TOKENS)


def _email_view(email: MergedEmail) -> EmailView:
    return EmailView(
        id=email.id,
        user_id=email.user_id,
        sender=email.sender,
        sender_email=email.sender_email,
        subject=email.subject,
        body=email.body,
        received_at=email.received_at,
        is_read=email.is_read,
        category=email.category,
        action_items=[ActionItemModel(task=i.task, deadline=i.deadline) for i in email.action_items],
        draft_reply=email.draft_reply
    )


def _annotation_response(result: AnnotationResult) -> AnnotationResponse:
    return AnnotationResponse(
        category=result.category,
        action_items=[ActionItemModel(task=i.task, deadline=i.deadline) for i in result.action_items],
        draft_reply=result.draft_reply
    )


def _prompt_view(template: PromptTemplate) -> PromptView:
    return PromptView(
        id=template.id,
        user_id=template.user_id,
        prompt_type=template.purpose,
        name=template.name,
        content=template.content
    )


class MailboxService:
    """User-scoped mailbox operations returning API models."""

    def __init__(self, engine: EmailBrainEngine):
        self.engine = engine

    def list_emails(self, user_id: str, category: Optional[str] = None) -> List[EmailView]:
        return [_email_view(e) for e in self.engine.list_emails(user_id, category)]

    def get_email(self, user_id: str, email_id: str) -> EmailView:
        return _email_view(self.engine.get_email(user_id, email_id))

    def mark_read(self, user_id: str, email_id: str) -> None:
        self.engine.mark_read(user_id, email_id)

    async def process_email(self, user_id: str, email_id: str) -> AnnotationResponse:
        result = await self.engine.process_email(user_id, email_id)
        return _annotation_response(result)

    def list_prompts(self, user_id: str) -> List[PromptView]:
        return [_prompt_view(t) for t in self.engine.list_prompts(user_id)]

    def update_prompt(
        self,
        user_id: str,
        prompt_id: str,
        name: Optional[str] = None,
        content: Optional[str] = None
    ) -> PromptView:
        return _prompt_view(self.engine.update_prompt(user_id, prompt_id, name=name, content=content))

    async def chat(self, user_id: str, message: str) -> str:
        return await self.engine.chat(user_id, message)

    def chat_history(self, user_id: str) -> List[ChatMessageView]:
        return [ChatMessageView(role=m.role, content=m.content) for m in self.engine.chat_history(user_id)]

    def model_metrics(self) -> dict:
        """Performance metrics of the text generator, when it keeps any."""
        metrics = getattr(self.engine.generator, "get_performance_metrics", None)
        return metrics() if callable(metrics) else {}


def get_mailbox_service(engine: EmailBrainEngine = Depends(get_engine)) -> MailboxService:
    """Provide mailbox service instance for dependency injection."""
    return MailboxService(engine)
