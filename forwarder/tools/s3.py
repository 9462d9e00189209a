"""
S3 Tools

Object store operations on messages written by the SES receipt rule.
Single attempt each; retry policy belongs to the caller.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from forwarder.config import get_settings
from forwarder.exceptions import StorageCopyError, StorageReadError

log = structlog.get_logger()


def _get_client():
    """Get S3 client."""
    settings = get_settings()
    return boto3.client("s3", **settings.s3_config)


def _error_details(e: Exception) -> tuple[str | None, str]:
    """Extract (code, message) from a botocore exception."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        return error.get("Code"), error.get("Message") or str(e)
    return None, str(e)


def copy_object(
    bucket: str,
    source_key: str,
    dest_key: str,
    *,
    acl: str = "private",
    client=None,
    log=log,
) -> None:
    """
    Copy an object within a bucket as a private, standalone object.

    Copying the SES-written object onto itself makes it owned by this
    account, which guarantees read permission for the following get.

    Args:
        bucket: Bucket holding the object
        source_key: Key of the object written by SES
        dest_key: Destination key (normally the same key)
        acl: Canned ACL for the copy
        client: Optional S3 client (default: from settings)
        log: Optional structlog logger for failure and debug events

    Raises:
        StorageCopyError: If the copy fails
    """
    client = client or _get_client()

    try:
        client.copy_object(
            Bucket=bucket,
            CopySource={"Bucket": bucket, "Key": source_key},
            Key=dest_key,
            ACL=acl,
            ContentType="text/plain",
            StorageClass="STANDARD",
            # Required for an in-place copy to be accepted
            MetadataDirective="REPLACE",
        )
    except (ClientError, BotoCoreError) as e:
        error_code, error_message = _error_details(e)
        log.error(
            "s3_copy_failed",
            bucket=bucket,
            key=source_key,
            error_code=error_code,
            error=error_message,
        )
        raise StorageCopyError(
            bucket=bucket,
            key=source_key,
            error_code=error_code,
            error_message=error_message,
        ) from e

    log.debug("s3_object_copied", bucket=bucket, key=dest_key)


def get_object_bytes(bucket: str, key: str, *, client=None, log=log) -> bytes:
    """
    Read the full content of an object.

    Raises:
        StorageReadError: If the object cannot be read
    """
    client = client or _get_client()

    try:
        response = client.get_object(Bucket=bucket, Key=key)
        content = response["Body"].read()
    except (ClientError, BotoCoreError) as e:
        error_code, error_message = _error_details(e)

        if error_code == "NoSuchKey":
            log.warning("s3_object_not_found", bucket=bucket, key=key)
        else:
            log.error(
                "s3_get_failed",
                bucket=bucket,
                key=key,
                error_code=error_code,
                error=error_message,
            )

        raise StorageReadError(
            bucket=bucket,
            key=key,
            error_code=error_code,
            error_message=error_message,
        ) from e

    log.debug("s3_object_read", bucket=bucket, key=key, size_bytes=len(content))

    return content
