"""
Recipient Mapper

Expands the original SES recipients into forwarding destinations.

Lookup precedence for each recipient (after lower-casing and optional
plus-suffix stripping):

1. full address          ``info@example.com``
2. domain                ``@example.com``
3. local part            ``info``
4. catch-all             ``@``

Destinations are concatenated in recipient order without deduplication.
The address of the last recipient that matched becomes the envelope
sender for the whole fan-out, even when several recipients matched
different rules.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from forwarder.models.context import Outcome, PipelineContext
from forwarder.models.forwarding import CATCH_ALL_KEY

PLUS_SUFFIX_PATTERN = re.compile(r"\+.*?@")


@dataclass
class RecipientMapping:
    """Result of mapping the original recipients."""

    recipients: list[str] = field(default_factory=list)
    original_recipient: str | None = None
    matched: list[str] = field(default_factory=list)


def normalize_address(address: str, *, allow_plus_sign: bool) -> str:
    """Lower-case an address and optionally drop a ``+suffix`` before ``@``."""
    key = address.lower()
    if allow_plus_sign:
        key = PLUS_SUFFIX_PATTERN.sub("@", key, count=1)
    return key


def lookup_destinations(
    key: str,
    forward_mapping: Mapping[str, Sequence[str]],
) -> Sequence[str] | None:
    """Find the destinations for a normalized address, or None."""
    if key in forward_mapping:
        return forward_mapping[key]

    pos = key.rfind("@")
    if pos == -1:
        domain, user = None, key
    else:
        domain, user = key[pos:], key[:pos]

    if domain and domain in forward_mapping:
        return forward_mapping[domain]
    if user and user in forward_mapping:
        return forward_mapping[user]
    if CATCH_ALL_KEY in forward_mapping:
        return forward_mapping[CATCH_ALL_KEY]

    return None


def map_recipients(
    original_recipients: Iterable[str],
    forward_mapping: Mapping[str, Sequence[str]],
    *,
    allow_plus_sign: bool,
) -> RecipientMapping:
    result = RecipientMapping()

    for original in original_recipients:
        key = normalize_address(original, allow_plus_sign=allow_plus_sign)
        destinations = lookup_destinations(key, forward_mapping)
        # A rule mapped to an empty list matches but never selects the sender
        if not destinations:
            continue

        result.recipients.extend(destinations)
        result.original_recipient = original
        result.matched.append(original)

    return result


def transform_recipients(ctx: PipelineContext) -> Outcome | None:
    """Replace the original recipients with forwarding destinations."""
    mapping = map_recipients(
        ctx.original_recipients,
        ctx.config.forward_mapping,
        allow_plus_sign=ctx.config.allow_plus_sign,
    )

    if not mapping.recipients:
        ctx.log.info(
            "no_new_recipients",
            original_recipients=ctx.original_recipients,
        )
        return Outcome.NO_OP_NO_MATCH

    if len(mapping.matched) > 1:
        ctx.log.warning(
            "multiple_matched_recipients",
            matched=mapping.matched,
            selected_source=mapping.original_recipient,
        )

    ctx.recipients = mapping.recipients
    ctx.original_recipient = mapping.original_recipient
    return None
