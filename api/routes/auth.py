"""
Authentication API Routes

Implements login, logout and current-user endpoints backed by opaque
session tokens carried in a cookie (or a bearer header).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response

from api.auth.service import AuthenticationService, get_auth_service, get_current_user, get_session_token
from api.models.auth import MessageResponse, UserCredentials, UserLoginResponse, UserProfile
from email_brain.models import User

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=UserLoginResponse,
    summary="User login endpoint"
)
async def login(
    credentials: UserCredentials,
    response: Response,
    auth_service: AuthenticationService = Depends(get_auth_service)
):
    """
    Login user and open a session.

    Sets the session cookie and returns the token for bearer use.

    Raises:
        Unauthenticated: If the credentials do not match (mapped to 401)
    """
    user, token = auth_service.login(credentials.email, credentials.password.get_secret_value())
    auth_service.set_session_cookie(response, token)

    return UserLoginResponse(
        user=UserProfile(**user.public_profile()),
        session_token=token
    )


@router.get(
    "/me",
    response_model=UserProfile,
    summary="Get current user information"
)
async def get_me(user: User = Depends(get_current_user)):
    """Return the profile of the session's user."""
    return UserProfile(**user.public_profile())


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="End the current session"
)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthenticationService = Depends(get_auth_service)
):
    """Revoke the session token, if any, and clear the cookie."""
    auth_service.logout(token)
    auth_service.clear_session_cookie(response)
    return MessageResponse(message="Logged out")
