"""
x402 screening client.

Pays for x402-protected HTTP APIs with gasless EIP-3009 USDC transfer
authorizations and exposes the CipherOwl address-screening endpoint.
"""

from .clients import Http402Client, X402Client
from .config import X402ClientConfig
from .engine.exceptions import (
    X402ClientError,
    ConfigurationError,
    ProtocolError,
    PaymentError,
    PaymentAmountExceededError,
    SettlementError,
)
from .schemas import (
    PaymentRequirements,
    PaymentRequiredResponse,
    PaymentPayload,
    SettlementResponse,
    ScreeningResult,
    X402Response,
)

__version__ = "0.1.0"

__all__ = [
    "Http402Client",
    "X402Client",
    "X402ClientConfig",
    "X402ClientError",
    "ConfigurationError",
    "ProtocolError",
    "PaymentError",
    "PaymentAmountExceededError",
    "SettlementError",
    "PaymentRequirements",
    "PaymentRequiredResponse",
    "PaymentPayload",
    "SettlementResponse",
    "ScreeningResult",
    "X402Response",
]
