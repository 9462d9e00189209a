"""
Configuration Management

Pydantic-settings based configuration for the SES forwarder.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from forwarder.models.forwarding import ForwardingConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with FORWARDER_ and are case-insensitive.
    Example: FORWARDER_EMAIL_BUCKET=my-inbound-mail

    ``FORWARDER_FORWARD_MAPPING`` is parsed as JSON, e.g.
    ``{"info@example.com": ["me@gmail.com"], "@": ["catchall@gmail.com"]}``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORWARDER_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage written by the SES receipt rule S3 action
    email_bucket: str = Field(
        default="ses-forwarder-inbound",
        description="S3 bucket where SES stores inbound messages",
    )
    email_key_prefix: str = Field(
        default="emails/",
        description="Object key prefix configured on the receipt rule",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )

    # Forwarding behaviour
    from_email: str | None = Field(
        default=None,
        description="Verified sender replacing the From address",
    )
    subject_prefix: str = Field(
        default="",
        description="Text prepended to the Subject header",
    )
    to_email: str | None = Field(
        default=None,
        description="Address replacing the To header",
    )
    allow_plus_sign: bool = Field(
        default=True,
        description="Strip +suffix from the local part before matching",
    )
    forward_mapping: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Original address/domain/user/catch-all to destinations",
    )

    # SES Configuration
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region}
        if self.s3_endpoint_url:
            config["endpoint_url"] = self.s3_endpoint_url
        return config

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config

    def forwarding_config(self) -> ForwardingConfig:
        """Build the immutable per-invocation forwarding configuration."""
        return ForwardingConfig(
            from_email=self.from_email,
            subject_prefix=self.subject_prefix,
            to_email=self.to_email,
            allow_plus_sign=self.allow_plus_sign,
            forward_mapping=self.forward_mapping,
            email_bucket=self.email_bucket,
            email_key_prefix=self.email_key_prefix,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
