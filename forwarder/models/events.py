"""
SES Event Models

Pydantic models for the SES receipt notification delivered to the
forwarder Lambda. Only the fields the pipeline reads are declared;
everything else in the event is ignored.

See https://docs.aws.amazon.com/ses/latest/dg/receiving-email-action-lambda-event.html
"""

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

SES_EVENT_SOURCE: Final[str] = "aws:ses"
SES_EVENT_VERSION: Final[str] = "1.0"


class SESMail(BaseModel):
    """Message descriptor from the ``ses.mail`` object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    message_id: str = Field(..., alias="messageId", min_length=1)
    source: str | None = Field(default=None, description="Envelope MAIL FROM")
    timestamp: str | None = Field(default=None)
    destination: list[str] = Field(default_factory=list)
    common_headers: dict[str, Any] = Field(default_factory=dict, alias="commonHeaders")


class SESReceipt(BaseModel):
    """Receipt details from the ``ses.receipt`` object."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    recipients: list[str] = Field(..., description="Original envelope recipients")


class SESPayload(BaseModel):
    """The ``ses`` object of a record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    mail: SESMail
    receipt: SESReceipt


class SESRecord(BaseModel):
    """A single record of an SES receipt notification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    event_source: str = Field(..., alias="eventSource")
    event_version: str = Field(..., alias="eventVersion")
    ses: SESPayload


class InboundNotification(BaseModel):
    """SES receipt notification. Valid only with exactly one record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    records: list[SESRecord] = Field(..., alias="Records")
