# Forwarding Pipeline
"""
The five forwarding stages and their orchestrator.
"""

from forwarder.pipeline.validator import parse_event, validate_notification
from forwarder.pipeline.recipients import (
    RecipientMapping,
    map_recipients,
    normalize_address,
    transform_recipients,
)
from forwarder.pipeline.fetcher import fetch_message
from forwarder.pipeline.rewriter import (
    parse_header,
    process_message,
    rewrite_header,
    rewrite_message,
    split_message,
)
from forwarder.pipeline.dispatcher import send_message
from forwarder.pipeline.runner import DEFAULT_STEPS, handle, run_pipeline

__all__ = [
    # Stages
    "parse_event",
    "transform_recipients",
    "fetch_message",
    "process_message",
    "send_message",
    # Building blocks
    "validate_notification",
    "RecipientMapping",
    "map_recipients",
    "normalize_address",
    "parse_header",
    "rewrite_header",
    "rewrite_message",
    "split_message",
    # Orchestration
    "DEFAULT_STEPS",
    "handle",
    "run_pipeline",
]
