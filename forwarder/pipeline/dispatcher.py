"""
Message Dispatcher

Hands the rewritten message to SES in a single SendRawEmail request.
"""

from forwarder.models.context import PipelineContext
from forwarder.pipeline.fetcher import encode_message
from forwarder.tools import ses


def send_message(ctx: PipelineContext) -> None:
    ctx.log.info(
        "sending_email",
        original_recipients=ctx.original_recipients,
        recipients=ctx.recipients,
        source=ctx.original_recipient,
    )

    ctx.ses_message_id = ses.send_raw_email(
        ctx.recipients,
        ctx.original_recipient,
        encode_message(ctx.email_data or ""),
        client=ctx.ses_client,
        log=ctx.log,
    )

    ctx.log.info("email_sent", ses_message_id=ctx.ses_message_id)
