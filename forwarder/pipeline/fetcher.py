"""
Message Fetcher

Loads the raw message SES stored in S3.
"""

from forwarder.models.context import PipelineContext
from forwarder.tools import s3

# Bytes that are not valid UTF-8 survive decode/encode unchanged
MESSAGE_ENCODING = "utf-8"
MESSAGE_ERRORS = "surrogateescape"


def decode_message(data: bytes) -> str:
    return data.decode(MESSAGE_ENCODING, MESSAGE_ERRORS)


def encode_message(text: str) -> bytes:
    return text.encode(MESSAGE_ENCODING, MESSAGE_ERRORS)


def fetch_message(ctx: PipelineContext) -> None:
    """Copy the stored object onto itself, then read it into the context."""
    bucket = ctx.config.email_bucket
    key = ctx.config.object_key(ctx.message_id)

    ctx.log.info("fetching_email", location=f"s3://{bucket}/{key}")

    s3.copy_object(bucket, key, key, acl="private", client=ctx.s3_client, log=ctx.log)
    data = s3.get_object_bytes(bucket, key, client=ctx.s3_client, log=ctx.log)

    ctx.email_data = decode_message(data)
