"""
Prompt Template Models
"""

from typing import Optional

from pydantic import BaseModel, Field

from email_brain.models import PromptPurpose


class PromptView(BaseModel):
    """Prompt template as exposed to its owner."""
    id: str
    user_id: str
    prompt_type: PromptPurpose = Field(
        ...,
        description="Pipeline stage the template instructs"
    )
    name: str
    content: str


class PromptUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""
    name: Optional[str] = Field(
        default=None,
        description="New display name"
    )
    content: Optional[str] = Field(
        default=None,
        description="New template content"
    )
