"""
Pipeline Context and Outcomes

The context is created by the orchestrator for one run and handed to each
stage in turn. It is never returned to callers; callers get a PipelineResult.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from forwarder.models.events import SESMail
from forwarder.models.forwarding import ForwardingConfig


class Outcome(str, Enum):
    """Successful terminal states of a run."""

    DELIVERED = "Delivered"
    """Message rewritten and accepted by SES."""

    NO_OP_NO_MATCH = "NoOpNoMatch"
    """No original recipient matched a forwarding rule; nothing was sent."""


@dataclass
class PipelineContext:
    """Mutable state threaded through the stages of a single run."""

    notification: Any
    config: ForwardingConfig
    s3_client: Any
    ses_client: Any
    log: Any = field(default_factory=structlog.get_logger)

    mail: SESMail | None = None
    original_recipients: list[str] = field(default_factory=list)
    recipients: list[str] = field(default_factory=list)
    original_recipient: str | None = None
    email_data: str | None = None
    ses_message_id: str | None = None

    @property
    def message_id(self) -> str | None:
        return self.mail.message_id if self.mail else None


@dataclass(frozen=True)
class PipelineResult:
    """What the caller sees after a successful run."""

    outcome: Outcome
    message_id: str | None
    original_recipients: tuple[str, ...] = ()
    recipients: tuple[str, ...] = ()
    source: str | None = None
    ses_message_id: str | None = None

    @property
    def delivered(self) -> bool:
        return self.outcome is Outcome.DELIVERED

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "outcome": self.outcome.value,
            "message_id": self.message_id,
            "original_recipients": list(self.original_recipients),
            "recipients": list(self.recipients),
            "source": self.source,
            "ses_message_id": self.ses_message_id,
        }
