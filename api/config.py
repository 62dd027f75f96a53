"""
API Configuration Management

Provides centralized configuration handling with environment-aware settings
for the transport layer, the session cookie, the dataset location and the
text-generation backend.

Design Considerations:
- Environment-specific configuration profiles
- Secret handling for the model API key
- Default values with proper documentation
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, SecretStr, field_validator


class EnvironmentType(str, Enum):
    """Valid environment types for configuration context."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class APISettings(BaseSettings):
    """
    API configuration settings with environment-specific defaults and validation.

    Values are read from the environment or a ``.env`` file.
    """
    # Environment Configuration
    ENVIRONMENT: EnvironmentType = Field(
        default=EnvironmentType.DEVELOPMENT,
        description="Runtime environment context"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    # API Settings
    API_TITLE: str = Field(
        default="Email Brain API",
        description="API title for documentation"
    )
    API_DESCRIPTION: str = Field(
        default="Mailbox enrichment and mailbox-aware chat assistant",
        description="API description for documentation"
    )
    API_VERSION: str = Field(
        default="1.0.0",
        description="API version"
    )

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Comma-separated list of allowed origins for CORS"
    )
    CORS_METHODS: str = Field(
        default="GET,POST,PUT,PATCH,DELETE,OPTIONS",
        description="Comma-separated list of allowed methods for CORS"
    )

    # Session Settings
    SESSION_COOKIE_NAME: str = Field(
        default="session_token",
        description="Cookie carrying the session token"
    )
    SESSION_MAX_AGE_SECONDS: int = Field(
        default=7 * 24 * 60 * 60,
        description="Advisory max-age for the session cookie"
    )

    # Data Settings
    DATASET_PATH: str = Field(
        default="data/mock_data.json",
        description="JSON file with users, emails and prompts loaded at startup"
    )

    # Text Generation Settings
    GROQ_API_KEY: Optional[SecretStr] = Field(
        default=None,
        description="API key for the Groq text-generation service"
    )
    MODEL_NAME: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model used for annotation and chat"
    )
    MODEL_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for model calls"
    )
    MODEL_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single model call"
    )
    CHAT_MAX_TOKENS: int = Field(
        default=1000,
        ge=1,
        description="Maximum tokens in a chat reply"
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def parse_cors_origins(cls, value: str) -> list:
        """Parse comma-separated CORS origins into list."""
        if value == "*":
            return ["*"]
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("CORS_METHODS")
    @classmethod
    def parse_cors_methods(cls, value: str) -> list:
        """Parse comma-separated CORS methods into list."""
        return [method.strip() for method in value.split(",") if method.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }


@lru_cache()
def get_settings() -> APISettings:
    """
    Retrieve validated API settings.

    Cached so every component shares one settings instance; call
    ``get_settings.cache_clear()`` after changing the environment in tests.

    Raises:
        ValidationError: If configuration fails validation
    """
    return APISettings()
