# SES Forwarder
"""
Inbound email forwarding for Amazon SES.

This package provides:
- SES event and forwarding configuration models
- The forwarding pipeline (validate, map, fetch, rewrite, dispatch)
- S3 and SES tools
- Configuration management
- Custom exceptions
"""

from forwarder.config import Settings, get_settings
from forwarder.exceptions import (
    DispatchError,
    ForwarderError,
    InvalidEventError,
    StorageCopyError,
    StorageError,
    StorageReadError,
)
from forwarder.models import ForwardingConfig, Outcome, PipelineResult
from forwarder.pipeline import handle

__all__ = [
    # Entry point
    "handle",
    # Models
    "ForwardingConfig",
    "Outcome",
    "PipelineResult",
    # Exceptions
    "ForwarderError",
    "InvalidEventError",
    "StorageError",
    "StorageCopyError",
    "StorageReadError",
    "DispatchError",
    # Config
    "Settings",
    "get_settings",
]
