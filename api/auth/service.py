"""
Authentication Service Implementation

Provides session-based authentication: credential checks against the
dataset, opaque session tokens, and the dependency that resolves the
current user for every session-gated route.

Design Considerations:
- Tokens are opaque capabilities validated centrally by the session store
- Token read from the session cookie, falling back to a bearer header
- No expiry beyond the advisory cookie max-age
"""

import logging
from typing import Optional, Tuple

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import APISettings, get_settings
from api.services.mailbox_service import get_engine
from email_brain.engine import EmailBrainEngine
from email_brain.models import User

# Configure logging
logger = logging.getLogger(__name__)

# Bearer header is optional: the cookie is the primary carrier
bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticationService:
    """
    Session authentication over the engine's session store.

    Issues session tokens on login, sets and clears the session cookie,
    and resolves tokens back to users.
    """

    def __init__(self, engine: EmailBrainEngine, settings: APISettings):
        self.engine = engine
        self.settings = settings

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate credentials and open a session.

        Raises:
            Unauthenticated: If the credentials do not match a user
        """
        return self.engine.authenticate(email, password)

    def logout(self, token: Optional[str]) -> None:
        if not self.engine.logout(token):
            logger.debug("Logout called without an active session")

    def set_session_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.settings.SESSION_COOKIE_NAME,
            value=token,
            httponly=True,
            secure=False,
            samesite="lax",
            max_age=self.settings.SESSION_MAX_AGE_SECONDS,
            path="/"
        )

    def clear_session_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self.settings.SESSION_COOKIE_NAME,
            path="/",
            secure=False,
            samesite="lax"
        )

    def token_from_request(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = None
    ) -> Optional[str]:
        """Session token from the cookie, else from an ``Authorization: Bearer`` header."""
        token = request.cookies.get(self.settings.SESSION_COOKIE_NAME)
        if not token and credentials is not None:
            token = credentials.credentials
        return token

    def current_user(self, token: Optional[str]) -> User:
        """
        Raises:
            Unauthenticated: If the token does not resolve to a user
        """
        return self.engine.user_for_token(token)


def get_auth_service(
    engine: EmailBrainEngine = Depends(get_engine),
    settings: APISettings = Depends(get_settings)
) -> AuthenticationService:
    """Provide authentication service instance for dependency injection."""
    return AuthenticationService(engine, settings)


async def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthenticationService = Depends(get_auth_service)
) -> Optional[str]:
    return auth_service.token_from_request(request, credentials)


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthenticationService = Depends(get_auth_service)
) -> User:
    """Require a valid session for route access."""
    return auth_service.current_user(token)
