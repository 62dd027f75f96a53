"""
Authentication Data Models

Defines request and response models for session login, logout and
current-user lookup.
"""

from pydantic import BaseModel, Field, SecretStr


class UserCredentials(BaseModel):
    """Login credentials compared against the dataset's user records."""
    email: str = Field(
        ...,
        min_length=1,
        description="User email address"
    )
    password: SecretStr = Field(
        ...,
        description="User password"
    )


class UserProfile(BaseModel):
    """Public user information returned to clients."""
    id: str = Field(
        ...,
        description="Unique user identifier"
    )
    email: str = Field(
        ...,
        description="User email address"
    )
    name: str = Field(
        ...,
        description="Display name"
    )


class UserLoginResponse(BaseModel):
    """
    Response model for successful login.

    The session token is also set as an httpOnly cookie; it is returned in
    the body for clients that send it as a bearer token instead.
    """
    user: UserProfile = Field(
        ...,
        description="Authenticated user"
    )
    session_token: str = Field(
        ...,
        description="Opaque session token"
    )


class MessageResponse(BaseModel):
    """Simple acknowledgement body."""
    message: str
