"""
Mailbox context summary used to ground chat answers.
"""

import json
from typing import Dict, Iterable, Optional

from email_brain.config.engine_config import ENGINE_CONFIG
from email_brain.models import Email
from email_brain.storage.overlays import EmailOverlayStore


class ChatContextBuilder:
    """Computes the per-user mailbox summary. Recomputed on every chat turn."""

    def __init__(self, uncategorized_label: Optional[str] = None):
        self.uncategorized_label = uncategorized_label or ENGINE_CONFIG["chat"]["uncategorized_label"]

    def category_histogram(self, emails: Iterable[Email], overlays: EmailOverlayStore) -> Dict[str, int]:
        histogram: Dict[str, int] = {}
        for email in emails:
            category = overlays.get_merged(email).category or self.uncategorized_label
            histogram[category] = histogram.get(category, 0) + 1
        return histogram

    def summarize(self, user_id: str, emails: Iterable[Email], overlays: EmailOverlayStore) -> str:
        """
        Single-sentence summary of the user's mailbox.

        Args:
            user_id: Owner whose emails are counted; other users' emails are ignored
            emails: Base email records
            overlays: Overlay store supplying read flags and categories

        Returns:
            e.g. ``User has 5 emails. 2 unread. Categories: {"Important":2,"Newsletter":3}``
        """
        owned = [e for e in emails if e.user_id == user_id]
        unread = sum(1 for e in owned if not overlays.get_merged(e).is_read)
        histogram = self.category_histogram(owned, overlays)
        categories = json.dumps(histogram, separators=(",", ":"), ensure_ascii=False)
        return f"User has {len(owned)} emails. {unread} unread. Categories: {categories}"
