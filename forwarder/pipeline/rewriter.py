"""
Message Rewriter

Rewrites the header block of a received message so SES will accept it
for re-sending from a verified address:

1. add ``Reply-To`` with the original ``From`` when no Reply-To exists
2. rewrite every ``From`` to the verified sender, keeping the display name
3. prefix the ``Subject``
4. replace the ``To`` header
5. drop ``Return-Path``, ``Sender`` and ``Message-ID``
6. drop every ``DKIM-Signature`` (invalidated by step 2; SES rejects
   duplicate signature headers)

The body is passed through untouched. Header names match case-insensitively
and every header is handled as one logical field including its folded
continuation lines.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from forwarder.models.context import PipelineContext
from forwarder.models.forwarding import ForwardingConfig

# First empty line separates header and body; it belongs to the body
HEADER_BOUNDARY = re.compile(r"^\r?\n", re.MULTILINE)
LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+\Z")
LINE_ENDING = re.compile(r"\r?\n\Z")
FOLD = re.compile(r"\r?\n(?=[ \t])")
FIELD_NAME = re.compile(r"([^\s:]+):")
# Trailing angle-addr of a mailbox: ``Alice <alice@example.com>``
ANGLE_ADDR = re.compile(r"<[^<>]*>\s*\Z")

REMOVED_HEADERS = ("return-path", "sender", "message-id")
DKIM_SIGNATURE = "dkim-signature"

log = structlog.get_logger()


@dataclass(frozen=True)
class HeaderField:
    """One logical header: its name and raw text including continuation lines."""

    name: str | None
    raw: str

    @property
    def key(self) -> str:
        return (self.name or "").lower()

    @property
    def line_ending(self) -> str:
        match = LINE_ENDING.search(self.raw)
        return match.group(0) if match else ""

    @property
    def value(self) -> str:
        """Text after the colon (and one optional blank), without the final line ending."""
        _, _, rest = self.raw.partition(":")
        if rest[:1] in (" ", "\t"):
            rest = rest[1:]
        return LINE_ENDING.sub("", rest)


def split_message(text: str) -> tuple[str, str]:
    """Split raw message text into (header, body) at the first blank line."""
    match = HEADER_BOUNDARY.search(text)
    if match is None:
        return text, ""
    return text[: match.start()], text[match.start():]


def parse_header(header: str) -> list[HeaderField]:
    """Group header lines into fields; lines starting with blanks continue the previous one."""
    fields: list[HeaderField] = []
    for line in LINE_PATTERN.findall(header):
        if fields and line[:1] in (" ", "\t"):
            previous = fields[-1]
            fields[-1] = HeaderField(previous.name, previous.raw + line)
            continue
        match = FIELD_NAME.match(line)
        fields.append(HeaderField(match.group(1) if match else None, line))
    return fields


def unfold(value: str) -> str:
    return FOLD.sub("", value)


def format_from(value: str, address: str, *, escape_display_name: bool) -> str:
    """Keep the display name of a From value and substitute the address."""
    display_name = ANGLE_ADDR.sub("", unfold(value).strip()).strip()
    if escape_display_name:
        # Avoid nesting an address inside the new angle brackets
        display_name = display_name.replace("<", "at ").replace(">", "")
    if display_name:
        return f"{display_name} <{address}>"
    return f"<{address}>"


def _header(name: str, value: str, line_ending: str) -> HeaderField:
    return HeaderField(name, f"{name}: {value}{line_ending}")


def _remove(fields: list[HeaderField], names: Iterable[str]) -> list[HeaderField]:
    names = frozenset(names)
    return [f for f in fields if f.key not in names]


def add_reply_to(fields: list[HeaderField], line_ending: str, log=log) -> list[HeaderField]:
    if any(f.key == "reply-to" for f in fields):
        return fields

    from_field = next((f for f in fields if f.key == "from"), None)
    if from_field is None:
        log.info("reply_to_not_added", reason="from_header_not_found")
        return fields
    if not from_field.value.strip():
        log.info("reply_to_not_added", reason="from_header_empty")
        return fields

    if fields[-1].line_ending == "":
        last = fields[-1]
        fields = [*fields[:-1], HeaderField(last.name, last.raw + line_ending)]

    reply_to = _header("Reply-To", from_field.value, from_field.line_ending or line_ending)
    log.info("reply_to_added", reply_to=unfold(from_field.value))
    return [*fields, reply_to]


def rewrite_from(
    fields: list[HeaderField],
    *,
    from_email: str | None,
    source_address: str | None,
    log=log,
) -> list[HeaderField]:
    address = from_email or source_address
    if address is None:
        log.warning("from_not_rewritten", reason="no_sender_address")
        return fields

    return [
        _header(
            "From",
            format_from(f.value, address, escape_display_name=not from_email),
            f.line_ending,
        )
        if f.key == "from"
        else f
        for f in fields
    ]


def prefix_subject(fields: list[HeaderField], prefix: str) -> list[HeaderField]:
    return [
        _header("Subject", prefix + f.value, f.line_ending) if f.key == "subject" else f
        for f in fields
    ]


def replace_to(fields: list[HeaderField], to_email: str) -> list[HeaderField]:
    return [
        _header("To", to_email, f.line_ending) if f.key == "to" else f
        for f in fields
    ]


def rewrite_header(
    header: str,
    config: ForwardingConfig,
    source_address: str | None,
    log=log,
) -> str:
    """Apply the forwarding header rules to a header block."""
    line_ending = "\r\n" if "\r\n" in header else "\n"
    fields = parse_header(header)

    fields = add_reply_to(fields, line_ending, log=log)
    fields = rewrite_from(
        fields,
        from_email=config.from_email,
        source_address=source_address,
        log=log,
    )
    if config.subject_prefix:
        fields = prefix_subject(fields, config.subject_prefix)
    if config.to_email:
        fields = replace_to(fields, config.to_email)
    fields = _remove(fields, REMOVED_HEADERS)

    dkim_count = sum(1 for f in fields if f.key == DKIM_SIGNATURE)
    if dkim_count:
        log.debug("dkim_signatures_removed", count=dkim_count)
    fields = _remove(fields, (DKIM_SIGNATURE,))

    return "".join(f.raw for f in fields)


def rewrite_message(
    text: str,
    config: ForwardingConfig,
    source_address: str | None,
    log=log,
) -> str:
    """Rewrite the header block of a raw message and re-attach the body."""
    header, body = split_message(text)
    return rewrite_header(header, config, source_address, log=log) + body


def process_message(ctx: PipelineContext) -> None:
    ctx.email_data = rewrite_message(
        ctx.email_data or "",
        ctx.config,
        ctx.original_recipient,
        log=ctx.log,
    )
