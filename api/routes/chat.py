"""
Chat API Routes

Mailbox-aware assistant endpoints: send a message, read the transcript.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.auth.service import get_current_user
from api.models.chat import ChatMessageView, ChatRequest, ChatResponse
from api.services.mailbox_service import MailboxService, get_mailbox_service
from email_brain.errors import ModelFailure
from email_brain.models import User

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/chat", tags=["Chat"])


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a message to the mailbox assistant"
)
async def send_message(
    request: ChatRequest,
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """
    Answer a message using the mailbox summary and prior conversation.

    A failed model call records nothing in the transcript.

    Raises:
        HTTPException: 500 if the model call fails
    """
    try:
        reply = await mailbox.chat(user.id, request.message)
    except ModelFailure as e:
        logger.error(f"Chat error for user {user.id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Chat failed: {e.message}"
        )
    return ChatResponse(response=reply)


@router.get(
    "/history",
    response_model=List[ChatMessageView],
    summary="Get the conversation transcript"
)
async def get_history(
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """Transcript in creation order; empty if the user never chatted."""
    return mailbox.chat_history(user.id)
