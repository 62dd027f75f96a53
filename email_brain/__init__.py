"""
Email Brain enrichment and context engine.

Maintains a derived-state overlay on immutable email records, runs the
three-stage annotation pipeline, and grounds a mailbox-aware chat
assistant in aggregate mailbox state.
"""

from .engine import EmailBrainEngine
from .errors import EmailBrainError, MalformedModelOutput, ModelFailure, NotFound, PromptConflict, Unauthenticated

__version__ = '1.0.0'

__all__ = [
    'EmailBrainEngine',
    'EmailBrainError',
    'MalformedModelOutput',
    'ModelFailure',
    'NotFound',
    'PromptConflict',
    'Unauthenticated'
]
