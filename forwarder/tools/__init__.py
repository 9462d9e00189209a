# Forwarder Tools
"""
AWS collaborators of the pipeline: the S3 object store and SES.
"""

from forwarder.tools.s3 import (
    copy_object,
    get_object_bytes,
)
from forwarder.tools.ses import send_raw_email

__all__ = [
    # S3 tools
    "copy_object",
    "get_object_bytes",
    # SES tools
    "send_raw_email",
]
