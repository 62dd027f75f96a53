"""
Chat Data Models
"""

from pydantic import BaseModel, Field

from email_brain.models import ChatRole


class ChatRequest(BaseModel):
    message: str = Field(
        ...,
        min_length=1,
        description="User utterance"
    )


class ChatResponse(BaseModel):
    response: str = Field(
        ...,
        description="Assistant reply"
    )


class ChatMessageView(BaseModel):
    """Stored chat message, in conversation order."""
    role: ChatRole
    content: str
