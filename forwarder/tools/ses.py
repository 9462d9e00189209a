"""
SES Tools

Outbound delivery of rewritten raw messages.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from forwarder.config import get_settings
from forwarder.exceptions import DispatchError

log = structlog.get_logger()


def _get_client():
    """Get SES client."""
    settings = get_settings()
    return boto3.client("ses", **settings.ses_config)


def send_raw_email(
    destinations: list[str],
    source: str,
    raw_message: bytes,
    *,
    client=None,
    log=log,
) -> str:
    """
    Send a raw MIME message via SES to every destination in one request.

    Args:
        destinations: Envelope recipients
        source: Envelope sender (must be verified in SES)
        raw_message: Complete message, header block and body
        client: Optional SES client (default: from settings)
        log: Optional structlog logger for send events

    Returns:
        SES message ID

    Raises:
        DispatchError: If SES rejects the request or the call fails
    """
    client = client or _get_client()

    try:
        response = client.send_raw_email(
            Destinations=list(destinations),
            Source=source,
            RawMessage={"Data": raw_message},
        )
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        error_message = e.response["Error"]["Message"]

        log.error(
            "ses_send_failed",
            source=source,
            destinations=list(destinations),
            error_code=error_code,
            error_message=error_message,
        )

        raise DispatchError(
            source=source,
            destinations=list(destinations),
            error_code=error_code,
            error_message=f"{error_code}: {error_message}",
        ) from e
    except BotoCoreError as e:
        log.error(
            "ses_send_failed",
            source=source,
            destinations=list(destinations),
            error_message=str(e),
        )
        raise DispatchError(
            source=source,
            destinations=list(destinations),
            error_message=str(e),
        ) from e

    message_id = response["MessageId"]

    log.info(
        "ses_raw_email_sent",
        ses_message_id=message_id,
        source=source,
        destination_count=len(destinations),
    )

    return message_id
