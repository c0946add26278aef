"""
Configuration management for simple-jwt.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JWTSettings(BaseSettings):
    """Settings used by ``create_manager``; every field reads ``JWT_<NAME>``."""

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Signing
    secret: str = Field(default="", description="Shared signing secret")
    algorithm: str = Field(default="md5", description="Signer algorithm name")

    # Validity windows, in minutes
    ttl: int = Field(default=60 * 60, ge=0, description="Token validity window (minutes)")
    refresh_ttl: int = Field(default=120 * 60, ge=0, description="Refresh window (minutes)")

    issuer: str = Field(default="", description="Value of the default iss claim")

    # Revocation store
    revocation_backend: Literal["filesystem", "memory", "redis"] = Field(default="filesystem")
    revocation_dir: Optional[str] = Field(default=None, description="Directory for filesystem markers")
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_prefix: str = Field(default="", description="Prefix prepended to redis marker keys")

    # Observability
    log_level: str = Field(default="info")


def get_settings(**overrides) -> JWTSettings:
    """Load settings from the environment, with explicit overrides winning."""
    return JWTSettings(**overrides)
