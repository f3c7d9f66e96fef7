"""
Exception and Error Definitions Module

Defines the exception hierarchy surfaced by the x402 payment client. Every
failure raised by the client derives from X402ClientError so callers can
catch a single root type. Nothing here is retried automatically; retry and
backoff are left to the caller.

Exception Hierarchy:
    X402ClientError (root)
    ├── ConfigurationError
    ├── ProtocolError
    ├── PaymentError
    │   └── PaymentAmountExceededError
    └── SettlementError
"""

from typing import Any, Optional


class X402ClientError(Exception):
    """
    Root exception class for all client-specific exceptions.

    All custom exceptions inherit from this class to enable unified
    exception handling at the call site.
    """
    pass


class ConfigurationError(X402ClientError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Malformed private key
    - Malformed API or RPC endpoint URL
    - Unsupported settlement network
    - Invalid numeric settings (e.g. a negative payment ceiling)
    """
    pass


class ProtocolError(X402ClientError):
    """
    Raised when a 402 response does not carry usable payment terms.

    This includes scenarios such as:
    - Response body is not valid JSON
    - ``accepts`` array is missing or empty
    - Payment requirement entries fail schema validation
    """
    pass


class PaymentError(X402ClientError):
    """
    Raised when building the payment authorization fails.

    Wraps the underlying cause (signing failure, unknown chain id,
    serialization error) so that no partial authorization escapes.
    The original exception is available as ``__cause__``.
    """
    pass


class PaymentAmountExceededError(PaymentError):
    """
    Raised when the server asks for more than the client's payment ceiling.

    Attributes:
        required: Amount requested by the server (smallest unit)
        maximum: Configured ceiling (smallest unit)
    """

    def __init__(self, required: int, maximum: int):
        self.required = required
        self.maximum = maximum
        super().__init__(
            f"Payment amount exceeds maximum allowed: "
            f"required {required}, maximum {maximum}"
        )


class SettlementError(X402ClientError):
    """
    Raised when the paid retry does not come back with a success status.

    Attributes:
        status: HTTP status code of the retried request
        body: Parsed (or raw-wrapped) response body for diagnosis
    """

    def __init__(self, status: int, body: Any, message: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(
            message or f"Payment settlement failed with status {status}: {body}"
        )
