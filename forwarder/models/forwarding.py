"""
Forwarding Configuration Model

Static configuration supplied by the deployment for one invocation.
Field aliases accept the camelCase keys used by JSON forwarder configs.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

CATCH_ALL_KEY = "@"


class ForwardingConfig(BaseModel):
    """Immutable forwarding rules and message location."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    from_email: str | None = Field(
        default=None,
        alias="fromEmail",
        description="Verified address replacing the From address",
    )
    subject_prefix: str = Field(
        default="",
        alias="subjectPrefix",
        description="Text prepended to the Subject header",
    )
    to_email: str | None = Field(
        default=None,
        alias="toEmail",
        description="Address replacing the whole To header",
    )
    allow_plus_sign: bool = Field(
        default=True,
        alias="allowPlusSign",
        description="Strip a +suffix from the local part before matching",
    )
    forward_mapping: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        alias="forwardMapping",
        description="Address, @domain, local part or '@' to destinations",
    )
    email_bucket: str = Field(
        ...,
        alias="emailBucket",
        description="S3 bucket holding the raw message",
    )
    email_key_prefix: str = Field(
        default="emails/",
        alias="emailKeyPrefix",
        description="Key prefix prepended to the SES message ID",
    )

    @field_validator("forward_mapping", mode="before")
    @classmethod
    def lowercase_keys(cls, v: object) -> object:
        """Lookups use lower-cased addresses, so keys are normalized to match."""
        if isinstance(v, dict):
            return {str(key).lower(): value for key, value in v.items()}
        return v

    def object_key(self, message_id: str) -> str:
        """S3 key of the stored message."""
        return f"{self.email_key_prefix}{message_id}"
