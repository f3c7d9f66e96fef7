"""
Client module for x402 payments.

Provides easy-to-use interfaces for accessing x402-protected resources
with automatic EIP-3009 authorization signing and paid retries.
"""

from .http_client import Http402Client
from .x402_client import X402Client, build_screening_url

__all__ = ["Http402Client", "X402Client", "build_screening_url"]
