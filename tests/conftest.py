"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, sample SES events and messages, and
forwarding configurations.
"""

import os
from typing import Any

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["FORWARDER_EMAIL_BUCKET"] = "test-inbound-mail"
os.environ["FORWARDER_EMAIL_KEY_PREFIX"] = "emails/"
os.environ["FORWARDER_FORWARD_MAPPING"] = '{"info@example.com": ["owner@gmail.com"]}'
os.environ["FORWARDER_AWS_REGION"] = "us-west-2"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from forwarder.config import get_settings  # noqa: E402
from forwarder.models.forwarding import ForwardingConfig  # noqa: E402
from tests.utils.event_generator import MockEventGenerator  # noqa: E402

TEST_BUCKET = "test-inbound-mail"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- Generators ---


@pytest.fixture
def event_generator() -> MockEventGenerator:
    """Deterministic SES event and message generator."""
    return MockEventGenerator(seed=42)


# --- Configuration Fixtures ---


@pytest.fixture
def forward_mapping() -> dict[str, list[str]]:
    return {
        "info@example.com": ["owner@gmail.com", "partner@gmail.com"],
        "@example.com": ["everything@gmail.com"],
        "support": ["helpdesk@gmail.com"],
    }


@pytest.fixture
def forwarding_config(forward_mapping) -> ForwardingConfig:
    """Config matching the defaults the deployment generates."""
    return ForwardingConfig(
        from_email=None,
        subject_prefix="",
        email_bucket=TEST_BUCKET,
        email_key_prefix="emails/",
        allow_plus_sign=True,
        forward_mapping=forward_mapping,
    )


# --- Message Fixtures ---


@pytest.fixture
def sample_message() -> str:
    """Raw message as stored by the SES S3 action."""
    return (
        "Return-Path: <alice@sender.net>\r\n"
        "DKIM-Signature: v=1; a=rsa-sha256; d=sender.net; s=s1;\r\n"
        "\th=from:to:subject; bh=abc=;\r\n"
        "\tb=def=\r\n"
        "From: Alice <alice@sender.net>\r\n"
        "To: info@example.com\r\n"
        "Subject: Hello\r\n"
        "Message-ID: <1234@mail.sender.net>\r\n"
        "Content-Type: text/plain; charset=UTF-8\r\n"
        "\r\n"
        "Hi there,\r\n"
        "\r\n"
        "See you soon.\r\n"
    )


@pytest.fixture
def sample_event(event_generator) -> dict[str, Any]:
    return event_generator.ses_event(
        ["info@example.com"],
        message_id="o3vrnil0e2ic28trm7dfhrc2v0clambda4nbp0g1",
    )


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_aws_all(aws_credentials):
    """
    Mock all AWS services used by the forwarder.

    Yields (s3_client, ses_client).
    """
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(
            Bucket=TEST_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_domain_identity(Domain="example.com")
        yield s3, ses
