"""
Unit tests for the SES event validator.
"""

import copy

import pytest
import structlog
from structlog.testing import capture_logs

from forwarder.exceptions import InvalidEventError
from forwarder.models.context import PipelineContext
from forwarder.pipeline.validator import parse_event, validate_notification


class TestValidateNotification:
    """Tests for validate_notification."""

    def test_valid_event(self, sample_event):
        notification = validate_notification(sample_event)

        record = notification.records[0]
        assert record.event_source == "aws:ses"
        assert record.ses.mail.message_id == "o3vrnil0e2ic28trm7dfhrc2v0clambda4nbp0g1"
        assert record.ses.receipt.recipients == ["info@example.com"]

    @pytest.mark.parametrize("count", [0, 2, 3])
    def test_record_count_other_than_one_rejected(self, sample_event, count):
        event = {"Records": sample_event["Records"] * count}

        with pytest.raises(InvalidEventError, match="exactly one record"):
            validate_notification(event)

    def test_wrong_event_source_rejected(self, sample_event):
        sample_event["Records"][0]["eventSource"] = "aws:s3"

        with pytest.raises(InvalidEventError, match="eventSource"):
            validate_notification(sample_event)

    def test_wrong_event_version_rejected(self, sample_event):
        sample_event["Records"][0]["eventVersion"] = "2.0"

        with pytest.raises(InvalidEventError, match="eventVersion"):
            validate_notification(sample_event)

    @pytest.mark.parametrize("event", [None, "text", [], {}, {"Records": "nope"}])
    def test_non_ses_shapes_rejected(self, event):
        with pytest.raises(InvalidEventError):
            validate_notification(event)

    def test_missing_receipt_rejected(self, sample_event):
        del sample_event["Records"][0]["ses"]["receipt"]

        with pytest.raises(InvalidEventError, match="malformed SES record") as exc_info:
            validate_notification(sample_event)

        assert "receipt" in exc_info.value.reason

    def test_missing_message_id_rejected(self, sample_event):
        del sample_event["Records"][0]["ses"]["mail"]["messageId"]

        with pytest.raises(InvalidEventError):
            validate_notification(sample_event)


class TestParseEvent:
    """Tests for the parse_event stage."""

    def _context(self, event, forwarding_config):
        return PipelineContext(
            notification=event,
            config=forwarding_config,
            s3_client=None,
            ses_client=None,
            log=structlog.get_logger(),
        )

    def test_populates_context(self, event_generator, forwarding_config):
        event = event_generator.ses_event(
            ["info@example.com", "Sales+x@Example.com"],
            message_id="abc123",
        )
        ctx = self._context(event, forwarding_config)

        assert parse_event(ctx) is None
        assert ctx.message_id == "abc123"
        assert ctx.original_recipients == ["info@example.com", "Sales+x@Example.com"]

    def test_rejection_logged_and_raised(self, sample_event, forwarding_config):
        event = copy.deepcopy(sample_event)
        event["Records"].append(event["Records"][0])

        with capture_logs() as logs:
            ctx = self._context(event, forwarding_config)
            with pytest.raises(InvalidEventError):
                parse_event(ctx)

        entry = next(e for e in logs if e["event"] == "invalid_ses_event")
        assert entry["log_level"] == "error"
        assert "expected exactly one record, got 2" == entry["reason"]
        assert ctx.mail is None

    def test_rejection_keeps_raw_event_in_log(self, forwarding_config):
        with capture_logs() as logs:
            ctx = self._context({"Records": [{}, {}]}, forwarding_config)
            with pytest.raises(InvalidEventError):
                parse_event(ctx)

        entry = next(e for e in logs if e["event"] == "invalid_ses_event")
        assert entry["raw_event"] == '{"Records": [{}, {}]}'

    @pytest.mark.parametrize("event", [{"Records": []}, {"Records": [{}, {}]}])
    def test_rejection_raises_invalid_event_with_configured_logger(self, event, forwarding_config):
        ctx = self._context(event, forwarding_config)

        with pytest.raises(InvalidEventError):
            parse_event(ctx)

    def test_mail_metadata_bound_to_log(self, event_generator, forwarding_config):
        event = event_generator.ses_event(
            ["info@example.com"],
            message_id="abc123",
            sender="alice@sender.net",
            subject="Quarterly report",
        )

        with capture_logs() as logs:
            ctx = self._context(event, forwarding_config)
            parse_event(ctx)
            ctx.log.info("next_stage")

        accepted = next(e for e in logs if e["event"] == "ses_event_accepted")
        assert accepted["message_id"] == "abc123"
        assert accepted["mail_source"] == "alice@sender.net"
        assert accepted["mail_timestamp"]
        assert accepted["destination"] == ["info@example.com"]
        assert accepted["subject"] == "Quarterly report"
        assert logs[-1]["mail_source"] == "alice@sender.net"
