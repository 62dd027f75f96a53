"""
Email Overlay Store

Holds the mutable derived state (read flag, category, action items, draft
reply) for each email, keyed by email identifier, and merges it with the
immutable base record on read.

Design Considerations:
- Overlays are created lazily on the first mutation
- An absent overlay is a valid state meaning "unread unless the base record
  says otherwise, nothing annotated yet"
- Annotation writes replace all three derived fields together and never
  touch the read flag
- Writers targeting the same email are serialized through a per-email lock
  that leaves other emails unaffected
"""

import asyncio
import logging
from dataclasses import replace
from typing import Dict, Optional

from email_brain.models import AnnotationResult, Email, EmailOverlay, MergedEmail

logger = logging.getLogger(__name__)


class EmailOverlayStore:
    """Process-lifetime overlay records with per-email write exclusion."""

    def __init__(self):
        self._overlays: Dict[str, EmailOverlay] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, email_id: str) -> Optional[EmailOverlay]:
        """Return a snapshot of the overlay for ``email_id``, if one exists."""
        overlay = self._overlays.get(email_id)
        return replace(overlay) if overlay is not None else None

    def get_merged(self, email: Email) -> MergedEmail:
        """
        Combine ``email`` with its overlay.

        Args:
            email: Immutable base record

        Returns:
            Merged view; the read flag is true if either the base record or
            the overlay marks the email as read
        """
        overlay = self._overlays.get(email.id)
        if overlay is None:
            return MergedEmail(
                id=email.id,
                user_id=email.user_id,
                sender=email.sender,
                sender_email=email.sender_email,
                subject=email.subject,
                body=email.body,
                received_at=email.received_at,
                is_read=email.is_read,
            )

        return MergedEmail(
            id=email.id,
            user_id=email.user_id,
            sender=email.sender,
            sender_email=email.sender_email,
            subject=email.subject,
            body=email.body,
            received_at=email.received_at,
            is_read=email.is_read or overlay.is_read,
            category=overlay.category,
            action_items=overlay.action_items,
            draft_reply=overlay.draft_reply,
        )

    def mark_read(self, email_id: str) -> None:
        overlay = self._overlays.setdefault(email_id, EmailOverlay())
        if not overlay.is_read:
            overlay.is_read = True
            logger.info(f"Email {email_id} marked as read")

    def apply_annotation(self, email_id: str, annotation: AnnotationResult) -> None:
        """
        Replace category, action items and draft reply in one step.

        The read flag of an existing overlay is preserved.
        """
        current = self._overlays.get(email_id)
        self._overlays[email_id] = EmailOverlay(
            is_read=current.is_read if current is not None else False,
            category=annotation.category,
            action_items=tuple(annotation.action_items),
            draft_reply=annotation.draft_reply,
        )
        logger.info(
            f"Annotation stored for email {email_id}: category={annotation.category!r}, "
            f"{len(annotation.action_items)} action items"
        )

    def lock_for(self, email_id: str) -> asyncio.Lock:
        """Exclusion token serializing annotation runs on one email."""
        lock = self._locks.get(email_id)
        if lock is None:
            lock = self._locks[email_id] = asyncio.Lock()
        return lock

    def reset(self) -> None:
        self._overlays.clear()
        self._locks.clear()
