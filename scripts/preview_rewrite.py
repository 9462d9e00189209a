#!/usr/bin/env python3
"""
Preview the forwarding header rewrite for a raw message.

Reads an .eml file (as stored by the SES S3 action), applies the same
header rules as the Lambda and prints the result. No AWS access.

Usage:
    python scripts/preview_rewrite.py message.eml --source info@example.com
    python scripts/preview_rewrite.py message.eml --source info@example.com \\
        --from-email forwarder@example.com --subject-prefix "[FWD] "
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from forwarder.models.forwarding import ForwardingConfig  # noqa: E402
from forwarder.pipeline.fetcher import decode_message, encode_message  # noqa: E402
from forwarder.pipeline.rewriter import rewrite_message, split_message  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show how a stored message is rewritten before forwarding",
    )
    parser.add_argument("message", type=Path, help="Path to the raw .eml file")
    parser.add_argument(
        "--source",
        required=True,
        help="Original recipient selected as the envelope sender",
    )
    parser.add_argument("--from-email", help="Verified From address override")
    parser.add_argument("--subject-prefix", default="", help="Subject prefix")
    parser.add_argument("--to-email", help="To header override")
    parser.add_argument(
        "--header-only",
        action="store_true",
        help="Print only the rewritten header block",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = ForwardingConfig(
        from_email=args.from_email,
        subject_prefix=args.subject_prefix,
        to_email=args.to_email,
        email_bucket="local",
    )

    text = decode_message(args.message.read_bytes())
    rewritten = rewrite_message(text, config, args.source)

    if args.header_only:
        rewritten, _ = split_message(rewritten)

    sys.stdout.buffer.write(encode_message(rewritten))
    return 0


if __name__ == "__main__":
    sys.exit(main())
