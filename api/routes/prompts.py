"""
Prompt Template API Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path

from api.auth.service import get_current_user
from api.models.prompts import PromptUpdateRequest, PromptView
from api.services.mailbox_service import MailboxService, get_mailbox_service
from email_brain.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])


@router.get(
    "",
    response_model=List[PromptView],
    summary="List the user's prompt templates"
)
async def list_prompts(
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    return mailbox.list_prompts(user.id)


@router.put(
    "/{prompt_id}",
    response_model=PromptView,
    summary="Update a prompt template"
)
async def update_prompt(
    request: PromptUpdateRequest,
    prompt_id: str = Path(..., description="Prompt template identifier"),
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """
    Partially update a prompt template; omitted fields are left unchanged.

    Raises:
        NotFound: If the template does not exist or belongs to someone else
    """
    return mailbox.update_prompt(user.id, prompt_id, name=request.name, content=request.content)
