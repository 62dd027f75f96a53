"""
Session token store.

Tokens are opaque capability strings mapped to a user id. A token stays
valid until it is revoked; expiry is left to the transport cookie.
"""

import logging
import uuid
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory mapping of session token to user identifier."""

    def __init__(self):
        self._sessions: Dict[str, str] = {}

    def create(self, user_id: str) -> str:
        """Issue a new unique token for ``user_id``."""
        token = uuid.uuid4().hex
        while token in self._sessions:
            token = uuid.uuid4().hex
        self._sessions[token] = user_id
        logger.info(f"Session created for user {user_id}")
        return token

    def resolve(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        return self._sessions.get(token)

    def revoke(self, token: Optional[str]) -> bool:
        """Remove ``token``. Returns False when it was not active."""
        if not token:
            return False
        user_id = self._sessions.pop(token, None)
        if user_id is None:
            return False
        logger.info(f"Session revoked for user {user_id}")
        return True

    def __len__(self) -> int:
        return len(self._sessions)

    def reset(self) -> None:
        self._sessions.clear()
