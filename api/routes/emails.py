"""
Email API Routes

Implements endpoints for listing and reading merged email views, marking
emails read, and running the enrichment pipeline on demand.

Design Considerations:
- Every endpoint requires a valid session
- Emails owned by another user are reported as not found
- Model failures during processing map to 500 with the failure description
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from api.auth.service import get_current_user
from api.models.auth import MessageResponse
from api.models.emails import AnnotationResponse, EmailView
from api.services.mailbox_service import MailboxService, get_mailbox_service
from email_brain.errors import ModelFailure
from email_brain.models import User

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/emails", tags=["Emails"])


@router.get(
    "",
    response_model=List[EmailView],
    summary="List the user's emails"
)
async def list_emails(
    category: Optional[str] = Query(None, description="Filter by category; 'all' disables the filter"),
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """
    Retrieve merged views of the user's emails, newest first.

    Args:
        category: Optional category filter

    Returns:
        List of merged email views
    """
    return mailbox.list_emails(user.id, category)


@router.get(
    "/{email_id}",
    response_model=EmailView,
    summary="Get a single email"
)
async def get_email(
    email_id: str = Path(..., description="Email identifier"),
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """
    Retrieve the merged view of one email.

    Raises:
        NotFound: If the email does not exist or belongs to someone else
    """
    return mailbox.get_email(user.id, email_id)


@router.patch(
    "/{email_id}/read",
    response_model=MessageResponse,
    summary="Mark an email as read"
)
async def mark_email_read(
    email_id: str = Path(..., description="Email identifier"),
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """Mark an email as read. Repeating the call has no further effect."""
    mailbox.mark_read(user.id, email_id)
    return MessageResponse(message="Email marked as read")


@router.post(
    "/{email_id}/process",
    response_model=AnnotationResponse,
    summary="Annotate an email with category, action items and a draft reply"
)
async def process_email(
    email_id: str = Path(..., description="Email identifier"),
    user: User = Depends(get_current_user),
    mailbox: MailboxService = Depends(get_mailbox_service)
):
    """
    Run the three-stage enrichment pipeline on an email.

    Re-processing recomputes and overwrites any earlier annotation.

    Returns:
        The stored annotation

    Raises:
        HTTPException: 500 if a model call fails; nothing is stored
    """
    try:
        return await mailbox.process_email(user.id, email_id)
    except ModelFailure as e:
        logger.error(f"Error processing email {email_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Processing failed: {e.message}"
        )
