"""
Error taxonomy for the enrichment and context engine.

NotFound and Unauthenticated are reported to the caller immediately.
ModelFailure aborts the running pipeline or chat turn with nothing
committed. MalformedModelOutput never leaves the action-item parser.
"""

from typing import Any, Dict, Optional


class EmailBrainError(Exception):
    """Base class for all engine errors."""

    error_code = "EMAIL_BRAIN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(EmailBrainError):
    """Referenced email or prompt does not exist or is not owned by the caller."""

    error_code = "NOT_FOUND"


class Unauthenticated(EmailBrainError):
    """Missing, unknown or revoked session, or mismatched credentials."""

    error_code = "UNAUTHENTICATED"


class ModelFailure(EmailBrainError):
    """The external text-generation capability errored or timed out."""

    error_code = "MODEL_FAILURE"


class MalformedModelOutput(EmailBrainError):
    """Action-extraction output had no usable JSON payload."""

    error_code = "MALFORMED_MODEL_OUTPUT"


class PromptConflict(EmailBrainError):
    """A template id or a (user, purpose) pair is already registered."""

    error_code = "PROMPT_CONFLICT"
