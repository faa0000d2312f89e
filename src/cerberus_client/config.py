"""Configuration for the Cerberus client."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CerberusSettings(BaseSettings):
    """Settings read from ``CERBERUS_*`` environment variables or a ``.env`` file.

    The credential fields pick the authentication method: a token wins,
    then username and password, then an IAM role ARN with a region, then
    an AWS region alone for STS authentication.
    """

    model_config = SettingsConfigDict(
        env_prefix="CERBERUS_",
        env_file=".env",
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Base URL of the Cerberus API")
    token: str | None = Field(default=None, description="Existing Cerberus token")
    username: str | None = Field(default=None, description="Username for user authentication")
    password: str | None = Field(default=None, description="Password for user authentication")
    region: str | None = Field(default=None, description="AWS region for IAM or STS authentication")
    role_arn: str | None = Field(default=None, description="IAM principal ARN for IAM authentication")
    timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    backoff_initial_interval: float = Field(
        default=0.1, ge=0, description="First retry delay in seconds"
    )
    backoff_multiplier: float = Field(
        default=2.0, ge=1, description="Growth factor applied to the retry delay"
    )
    backoff_max_interval: float = Field(
        default=0.6, ge=0, description="Upper bound on a single retry delay in seconds"
    )
    backoff_max_elapsed: float = Field(
        default=0.6, ge=0, description="Total time in seconds after which retries stop"
    )
