# api/services/__init__.py
"""
API Services Package

Centralizes service implementations for clean business logic
separation from route handlers.
"""

from api.services.mailbox_service import MailboxService, get_engine, get_mailbox_service

__all__ = ["MailboxService", "get_engine", "get_mailbox_service"]
