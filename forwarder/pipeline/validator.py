"""
Event Validator

First stage: accept only a single-record SES receipt notification.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from forwarder.exceptions import InvalidEventError
from forwarder.models.context import PipelineContext
from forwarder.models.events import (
    SES_EVENT_SOURCE,
    SES_EVENT_VERSION,
    InboundNotification,
)


def _rejection_reason(event: Any) -> str | None:
    """Return why the event is not a processable SES notification, or None."""
    if not isinstance(event, Mapping):
        return "event is not an object"

    records = event.get("Records")
    if not isinstance(records, list):
        return "missing Records list"
    if len(records) != 1:
        return f"expected exactly one record, got {len(records)}"

    record = records[0]
    if not isinstance(record, Mapping):
        return "record is not an object"
    if record.get("eventSource") != SES_EVENT_SOURCE:
        return f"unexpected eventSource {record.get('eventSource')!r}"
    if record.get("eventVersion") != SES_EVENT_VERSION:
        return f"unexpected eventVersion {record.get('eventVersion')!r}"

    return None


def validate_notification(event: Any) -> InboundNotification:
    """
    Validate a raw Lambda event as an SES receipt notification.

    Raises:
        InvalidEventError: If the shape, record count or tags are wrong
    """
    reason = _rejection_reason(event)
    if reason is None:
        try:
            return InboundNotification.model_validate(event)
        except ValidationError as e:
            errors = e.errors(include_url=False)
            reason = "malformed SES record: " + "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in errors
            )

    raise InvalidEventError(reason)


def parse_event(ctx: PipelineContext) -> None:
    """Extract the mail descriptor and original recipients into the context."""
    try:
        notification = validate_notification(ctx.notification)
    except InvalidEventError as e:
        ctx.log.error(
            "invalid_ses_event",
            reason=e.reason,
            raw_event=json.dumps(ctx.notification, default=str),
        )
        raise

    ses = notification.records[0].ses
    ctx.mail = ses.mail
    ctx.original_recipients = list(ses.receipt.recipients)
    ctx.log = ctx.log.bind(
        message_id=ses.mail.message_id,
        mail_source=ses.mail.source,
        mail_timestamp=ses.mail.timestamp,
    )
    ctx.log.info(
        "ses_event_accepted",
        original_recipients=ctx.original_recipients,
        destination=ses.mail.destination,
        subject=ses.mail.common_headers.get("subject"),
    )
