"""
Email Data Models

Defines response models for merged email views and annotation results.

Design Considerations:
- Merged views carry base fields plus overlay fields
- Type safety with clear annotations
- Consistent structure for client processing
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ActionItemModel(BaseModel):
    """Single extracted task."""
    task: str = Field(
        ...,
        description="Task description"
    )
    deadline: Optional[str] = Field(
        default=None,
        description="Deadline as stated by the model, if any"
    )


class EmailView(BaseModel):
    """
    Merged email view.

    Combines the immutable base record with its derived annotations.
    Annotation fields are empty until the email has been processed.
    """
    id: str = Field(
        ...,
        description="Unique email identifier"
    )
    user_id: str = Field(
        ...,
        description="Owning user identifier"
    )
    sender: str = Field(
        ...,
        description="Sender display name"
    )
    sender_email: str = Field(
        ...,
        description="Sender address"
    )
    subject: str = Field(
        ...,
        description="Email subject line"
    )
    body: str = Field(
        ...,
        description="Email body"
    )
    received_at: datetime = Field(
        ...,
        description="Email receive timestamp"
    )
    is_read: bool = Field(
        default=False,
        description="Whether the email has been read"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category assigned by the enrichment pipeline"
    )
    action_items: List[ActionItemModel] = Field(
        default_factory=list,
        description="Extracted action items"
    )
    draft_reply: Optional[str] = Field(
        default=None,
        description="Drafted reply"
    )


class AnnotationResponse(BaseModel):
    """Result of processing an email through the enrichment pipeline."""
    category: str = Field(
        ...,
        description="Category label as returned by the model"
    )
    action_items: List[ActionItemModel] = Field(
        default_factory=list,
        description="Extracted action items; empty when extraction output was malformed"
    )
    draft_reply: str = Field(
        ...,
        description="Drafted reply"
    )
