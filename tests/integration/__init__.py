"""
Integration tests for the SES forwarder.

These tests run the full pipeline against moto-mocked S3 and SES.
"""
