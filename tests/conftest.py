"""
Shared fixtures for the email brain test suite.

Provides a scripted text generator standing in for the Groq backend, a
small in-memory dataset, and an engine wired to both.
"""

from datetime import datetime, timezone

import pytest

from email_brain.engine import EmailBrainEngine
from email_brain.integrations.base import TextGenerator
from email_brain.models import Dataset, Email, PromptPurpose, PromptTemplate, User


class ScriptedGenerator(TextGenerator):
    """
    Text generator returning queued responses in order.

    Queue an Exception instance to make the corresponding call fail.
    Every call is recorded for later assertions.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.prompts = []
        self.conversations = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def _next(self):
        if not self.responses:
            raise AssertionError("ScriptedGenerator ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def generate(self, prompt: str, **options) -> str:
        self.prompts.append(prompt)
        return self._next()

    async def converse(self, prior_turns, new_turn, **options) -> str:
        self.conversations.append({"prior_turns": prior_turns, "new_turn": new_turn, "options": options})
        return self._next()


def make_email(email_id, user_id="user-1", is_read=False, day=1, subject="Status update"):
    return Email(
        id=email_id,
        user_id=user_id,
        sender="Priya Shah",
        sender_email="priya@acme.io",
        subject=subject,
        body="Please review the attached plan by Friday.",
        received_at=datetime(2025, 3, day, 9, 0, tzinfo=timezone.utc),
        is_read=is_read,
    )


@pytest.fixture
def generator():
    """Scripted text generator with an empty response queue."""
    return ScriptedGenerator()


@pytest.fixture
def dataset():
    """
    Two users; user-1 owns three emails (one already read) and a full set of
    prompts, user-2 owns one email and only a categorization prompt.
    """
    return Dataset(
        users=[
            User(id="user-1", email="alex@example.com", name="Alex Morgan", password="password123"),
            User(id="user-2", email="sam@example.com", name="Sam Lee", password="letmein"),
        ],
        emails=[
            make_email("email-1", day=10, subject="Q3 roadmap review"),
            make_email("email-2", day=9, subject="Weekly digest"),
            make_email("email-3", day=8, is_read=True, subject="Invoice approval"),
            make_email("email-4", user_id="user-2", day=11, subject="Lunch on Thursday?"),
        ],
        prompts=[
            PromptTemplate("prompt-1", "user-1", PromptPurpose.CATEGORIZATION, "Categorization",
                           "Categorize this email as Important, Newsletter or Spam."),
            PromptTemplate("prompt-2", "user-1", PromptPurpose.ACTION_EXTRACTION, "Action items",
                           "Extract tasks as JSON: {\"tasks\": [{\"task\": \"...\", \"deadline\": \"...\"}]}"),
            PromptTemplate("prompt-3", "user-1", PromptPurpose.AUTO_REPLY, "Auto reply",
                           "Draft a short polite reply."),
            PromptTemplate("prompt-4", "user-2", PromptPurpose.CATEGORIZATION, "Categorization",
                           "Categorize this email."),
        ],
    )


@pytest.fixture
def engine(dataset, generator):
    """Engine bound to the sample dataset and the scripted generator."""
    engine = EmailBrainEngine(dataset, generator)
    yield engine
    engine.reset()


@pytest.fixture
def scripted_generator_class():
    return ScriptedGenerator


@pytest.fixture
def email_factory():
    return make_email
