from .bases import CanonicalModel
from .https import (
    ClientRequestHeader,
    PaymentRequirements,
    PaymentRequiredResponse,
    TransferAuthorization,
    ExactEvmPayload,
    PaymentPayload,
    SettlementResponse,
    X402Response,
)
from .screening import ScreeningResult
from .versions import ProtocolVersion, X402_VERSION

__all__ = [
    "CanonicalModel",
    "ClientRequestHeader",
    "PaymentRequirements",
    "PaymentRequiredResponse",
    "TransferAuthorization",
    "ExactEvmPayload",
    "PaymentPayload",
    "SettlementResponse",
    "X402Response",
    "ScreeningResult",
    "ProtocolVersion",
    "X402_VERSION",
]
