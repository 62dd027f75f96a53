"""
Unit tests for the mailbox context summary.
"""

import pytest

from email_brain.chat.context import ChatContextBuilder
from email_brain.models import AnnotationResult
from email_brain.storage.overlays import EmailOverlayStore


def annotate(overlays, email_id, category):
    overlays.apply_annotation(email_id, AnnotationResult(category=category, action_items=(), draft_reply=""))


@pytest.fixture
def mailbox(email_factory):
    """Five emails for user-1 (three read) and one for user-2."""
    return [
        email_factory("e1", day=1),
        email_factory("e2", day=2),
        email_factory("e3", day=3, is_read=True),
        email_factory("e4", day=4, is_read=True),
        email_factory("e5", day=5),
        email_factory("other", user_id="user-2", day=6),
    ]


class TestChatContextBuilder:

    def test_summary_counts_and_histogram(self, mailbox):
        overlays = EmailOverlayStore()
        annotate(overlays, "e1", "Important")
        annotate(overlays, "e2", "Newsletter")
        annotate(overlays, "e3", "Important")
        annotate(overlays, "e4", "Newsletter")
        annotate(overlays, "e5", "Newsletter")
        overlays.mark_read("e5")

        summary = ChatContextBuilder().summarize("user-1", mailbox, overlays)

        assert summary == 'User has 5 emails. 2 unread. Categories: {"Important":2,"Newsletter":3}'

    def test_unannotated_emails_are_uncategorized(self, mailbox):
        overlays = EmailOverlayStore()
        annotate(overlays, "e2", "Important")

        summary = ChatContextBuilder().summarize("user-1", mailbox, overlays)

        assert summary == 'User has 5 emails. 3 unread. Categories: {"Uncategorized":4,"Important":1}'

    def test_custom_uncategorized_label(self, mailbox):
        builder = ChatContextBuilder(uncategorized_label="None yet")

        histogram = builder.category_histogram(mailbox[:2], EmailOverlayStore())

        assert histogram == {"None yet": 2}

    def test_empty_mailbox(self):
        summary = ChatContextBuilder().summarize("user-1", [], EmailOverlayStore())

        assert summary == "User has 0 emails. 0 unread. Categories: {}"

    def test_other_users_emails_are_ignored(self, mailbox):
        summary = ChatContextBuilder().summarize("user-2", mailbox, EmailOverlayStore())

        assert summary == 'User has 1 emails. 1 unread. Categories: {"Uncategorized":1}'
