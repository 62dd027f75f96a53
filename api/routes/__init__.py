"""
API Routes Package

Centralizes route management with proper module organization
and clean import structure.
"""

from api.routes import auth
from api.routes import emails
from api.routes import prompts
from api.routes import chat

__all__ = ["auth", "emails", "prompts", "chat"]
