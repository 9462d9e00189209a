"""
ForwardInboundEmail Lambda

Forwards inbound email received via an SES receipt rule to the
destinations configured in the forward mapping.

Flow:
    Inbound email
    → SES Receipt Rule (S3 action, then Lambda action)
    → This Lambda
    → SES SendRawEmail
"""

from lambdas.forward_inbound_email.handler import lambda_handler

__all__ = [
    "lambda_handler",
]
