"""
ForwardInboundEmail Lambda Handler

Main entry point for forwarding inbound email received by SES.

Trigger: SES receipt rule Lambda action (after the S3 action stored the message)
Output: SES SendRawEmail to the mapped destinations

Flow:
1. Validate the SES receipt notification
2. Map original recipients to forwarding destinations
3. Copy and read the stored message from S3
4. Rewrite the header block for re-sending
5. Send the raw message via SES
"""

import json
import logging
from typing import Any

import boto3
import structlog

from forwarder.config import get_settings
from forwarder.exceptions import ForwarderError
from forwarder.pipeline.runner import handle

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


def _configure_log_level(level: str) -> None:
    """The Lambda runtime installs a root handler; only its level needs setting."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(message)s")
    root.setLevel(level)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for forwarding one inbound email.

    Args:
        event: SES receipt notification
        context: Lambda context

    Returns:
        Response dict with the run outcome

    Raises:
        ForwarderError: Any stage failure; the invocation fails so the
            runtime can apply its retry policy
    """
    settings = get_settings()
    _configure_log_level(settings.log_level)

    request_id = getattr(context, "aws_request_id", "local")
    run_log = log.bind(request_id=request_id)

    run_log.info(
        "processing_inbound_email",
        event_keys=list(event.keys()) if isinstance(event, dict) else None,
    )

    try:
        result = handle(
            event,
            settings.forwarding_config(),
            s3_client=boto3.client("s3", **settings.s3_config),
            ses_client=boto3.client("ses", **settings.ses_config),
            log=run_log,
        )
    except ForwarderError as e:
        run_log.error(
            "forward_inbound_email_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    return {
        "statusCode": 200,
        "body": json.dumps(result.to_dict()),
    }
