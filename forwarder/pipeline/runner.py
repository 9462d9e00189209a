"""
Pipeline Orchestration

Runs the forwarding stages in order over one PipelineContext:

    parse_event → transform_recipients → fetch_message
        → process_message → send_message

A stage continues the run by returning None, ends it successfully by
returning an Outcome, and fails it by raising a ForwarderError. Failures
are logged once here and re-raised unchanged to the caller.
"""

from collections.abc import Callable, Sequence
from typing import Any

import structlog

from forwarder.exceptions import ForwarderError
from forwarder.models.context import Outcome, PipelineContext, PipelineResult
from forwarder.models.forwarding import ForwardingConfig
from forwarder.pipeline.dispatcher import send_message
from forwarder.pipeline.fetcher import fetch_message
from forwarder.pipeline.recipients import transform_recipients
from forwarder.pipeline.rewriter import process_message
from forwarder.pipeline.validator import parse_event

Step = Callable[[PipelineContext], Outcome | None]

DEFAULT_STEPS: tuple[Step, ...] = (
    parse_event,
    transform_recipients,
    fetch_message,
    process_message,
    send_message,
)


def _step_name(step: Step) -> str:
    return getattr(step, "__name__", repr(step))


def _result(ctx: PipelineContext, outcome: Outcome) -> PipelineResult:
    if outcome is Outcome.NO_OP_NO_MATCH:
        return PipelineResult(
            outcome=outcome,
            message_id=ctx.message_id,
            original_recipients=tuple(ctx.original_recipients),
        )
    return PipelineResult(
        outcome=outcome,
        message_id=ctx.message_id,
        original_recipients=tuple(ctx.original_recipients),
        recipients=tuple(ctx.recipients),
        source=ctx.original_recipient,
        ses_message_id=ctx.ses_message_id,
    )


def run_pipeline(ctx: PipelineContext, steps: Sequence[Step]) -> PipelineResult:
    """
    Execute steps sequentially, stopping at the first Outcome or error.

    Raises:
        ForwarderError: If a step entry is not callable, or any step fails
    """
    for step in steps:
        if not callable(step):
            raise ForwarderError(f"Invalid pipeline step: {step!r}", step=repr(step))

    for step in steps:
        try:
            outcome = step(ctx)
        except Exception as e:
            ctx.log.error(
                "step_failed",
                step=_step_name(step),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        if outcome is not None:
            ctx.log.info(
                "process_finished",
                outcome=outcome.value,
                step=_step_name(step),
            )
            return _result(ctx, outcome)

    ctx.log.info("process_finished", outcome=Outcome.DELIVERED.value)
    return _result(ctx, Outcome.DELIVERED)


def handle(
    notification: Any,
    config: ForwardingConfig,
    *,
    s3_client=None,
    ses_client=None,
    log=None,
    steps: Sequence[Step] | None = None,
) -> PipelineResult:
    """
    Forward one inbound SES message.

    Args:
        notification: Raw SES receipt event (Lambda event dict)
        config: Forwarding rules and message location
        s3_client: Optional boto3 S3 client (default: from settings)
        ses_client: Optional boto3 SES client (default: from settings)
        log: Optional structlog logger receiving the run's events
        steps: Optional replacement for DEFAULT_STEPS

    Returns:
        PipelineResult with outcome Delivered or NoOpNoMatch

    Raises:
        InvalidEventError: Notification is not a single SES record
        StorageCopyError: Stored message could not be copied
        StorageReadError: Stored message could not be read
        DispatchError: SES rejected the message
    """
    ctx = PipelineContext(
        notification=notification,
        config=config,
        s3_client=s3_client,
        ses_client=ses_client,
        log=log if log is not None else structlog.get_logger(),
    )
    return run_pipeline(ctx, DEFAULT_STEPS if steps is None else steps)
