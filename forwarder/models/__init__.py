# Forwarder Models
"""
Pydantic models for the SES event and forwarding configuration,
plus the per-run pipeline context.
"""

from forwarder.models.events import (
    SES_EVENT_SOURCE,
    SES_EVENT_VERSION,
    InboundNotification,
    SESMail,
    SESPayload,
    SESReceipt,
    SESRecord,
)
from forwarder.models.forwarding import CATCH_ALL_KEY, ForwardingConfig
from forwarder.models.context import Outcome, PipelineContext, PipelineResult

__all__ = [
    # SES event
    "SES_EVENT_SOURCE",
    "SES_EVENT_VERSION",
    "InboundNotification",
    "SESMail",
    "SESPayload",
    "SESReceipt",
    "SESRecord",
    # Configuration
    "CATCH_ALL_KEY",
    "ForwardingConfig",
    # Pipeline
    "Outcome",
    "PipelineContext",
    "PipelineResult",
]
