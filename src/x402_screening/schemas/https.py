"""
HTTP Request/Response Schema Models for the x402 Payment Protocol

This module defines the Pydantic models exchanged over HTTP between the
client and an x402-protected server. They ensure type-safe, validated
parsing of the 402 body and serialization of the payment header.

The payment flow consists of:
1. Server answers 402 with ``PaymentRequiredResponse`` (list of accepted options)
2. Client signs a ``TransferAuthorization`` for the first option
3. Client retries with ``PaymentPayload`` base64-encoded in ``X-PAYMENT``
4. Server settles and may answer with ``SettlementResponse`` in ``X-PAYMENT-RESPONSE``

Wire names are camelCase; attributes are snake_case (see ``CanonicalModel``).
"""

import re
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .bases import CanonicalModel
from .versions import X402_VERSION


_BYTES32_HEX = re.compile(r"^0x[0-9a-fA-F]{64}$")


# ============================================================================
# Request Headers
# ============================================================================

class ClientRequestHeader(BaseModel):
    """HTTP request headers added by the client.

    Attributes:
        content_type: MIME type of request body (default: application/json).
        x_payment: Base64-encoded ``PaymentPayload`` for the paid retry.
        expose_headers: Asks CORS-aware servers to expose the settlement header.
    """
    model_config = ConfigDict(populate_by_name=True)
    content_type: str = Field(default="application/json", alias="Content-Type")
    x_payment: Optional[str] = Field(default=None, alias="X-PAYMENT")
    expose_headers: Optional[str] = Field(default=None, alias="Access-Control-Expose-Headers")


# ============================================================================
# Step 1: Server's 402 Payment Required Response
# ============================================================================

class PaymentRequirements(CanonicalModel):
    """Server-declared payment terms for one accepted option.

    Instances are frozen: they are parsed once from the 402 body and
    never modified afterwards.

    Attributes:
        scheme: Payment scheme identifier (``"exact"`` for EIP-3009).
        network: Settlement network (``"base"``, ``"base-sepolia"`` or ``"eip155:<id>"``).
        max_amount_required: Required amount in the asset's smallest unit (decimal string).
        resource: URL of the protected resource.
        description: Human-readable description of the resource.
        mime_type: MIME type of the resource response.
        pay_to: Recipient address.
        asset: Token contract address.
        max_timeout_seconds: Optional server hint for the authorization lifetime.
        output_schema: Optional schema of the resource response.
        extra: Optional scheme-specific data (EIP-712 ``name`` / ``version``).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    scheme: str
    network: str
    max_amount_required: str = Field(..., alias="maxAmountRequired")
    resource: str = ""
    description: str = ""
    mime_type: str = Field(default="", alias="mimeType")
    pay_to: str = Field(..., alias="payTo")
    asset: str
    max_timeout_seconds: Optional[int] = Field(default=None, alias="maxTimeoutSeconds")
    output_schema: Optional[Any] = Field(default=None, alias="outputSchema")
    extra: Optional[Dict[str, Any]] = None

    @field_validator("max_amount_required", mode="before")
    @classmethod
    def _validate_amount(cls, v):
        if isinstance(v, bool):
            raise ValueError("maxAmountRequired must be an integer")
        try:
            amount = int(str(v))
        except ValueError:
            raise ValueError("maxAmountRequired must be an integer encoded as a string")
        if amount < 0:
            raise ValueError("maxAmountRequired must be non-negative")
        return str(amount)

    @property
    def amount(self) -> int:
        """Required amount as an integer in the smallest unit."""
        return int(self.max_amount_required)


class PaymentRequiredResponse(CanonicalModel):
    """Body of a 402 Payment Required response.

    Attributes:
        x402_version: Protocol version announced by the server.
        accepts: Accepted payment options, in server preference order.
        error: Optional server-side reason string.
    """
    x402_version: int = Field(default=int(X402_VERSION), alias="x402Version")
    accepts: List[PaymentRequirements] = Field(default_factory=list)
    error: Optional[str] = None


# ============================================================================
# Step 2: Client's Payment Header (X-PAYMENT)
# ============================================================================

class TransferAuthorization(CanonicalModel):
    """EIP-3009 ``TransferWithAuthorization`` fields as carried in the header.

    Integer fields are serialized as decimal strings, which is how x402
    facilitators expect uint256 values. Parsing accepts both forms.

    Attributes:
        authorizer: Payer address (``from``).
        recipient: Payee address (``to``).
        value: Amount in the smallest unit.
        valid_after: Unix time after which the authorization is valid.
        valid_before: Unix time before which it must be submitted.
        nonce: 0x-prefixed bytes32 hex nonce.
    """
    authorizer: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    value: int = Field(..., ge=0)
    valid_after: int = Field(..., ge=0, alias="validAfter")
    valid_before: int = Field(..., ge=0, alias="validBefore")
    nonce: str

    @field_validator("nonce")
    @classmethod
    def _validate_nonce(cls, v: str) -> str:
        if not _BYTES32_HEX.match(v):
            raise ValueError("nonce must be a 0x-prefixed 32-byte hex string")
        return v

    @field_serializer("value", "valid_after", "valid_before")
    def _serialize_uint(self, v: int) -> str:
        return str(v)


class ExactEvmPayload(CanonicalModel):
    """Signature plus the authorization it covers."""
    signature: str
    authorization: TransferAuthorization


class PaymentPayload(CanonicalModel):
    """Envelope sent base64-encoded in the ``X-PAYMENT`` header."""
    x402_version: int = Field(default=int(X402_VERSION), alias="x402Version")
    scheme: str
    network: str
    payload: ExactEvmPayload


# ============================================================================
# Step 3: Server's Settlement Response (X-PAYMENT-RESPONSE)
# ============================================================================

class SettlementResponse(CanonicalModel):
    """Decoded ``X-PAYMENT-RESPONSE`` header.

    Attributes:
        success: Whether the facilitator settled the transfer.
        transaction: Settlement transaction hash.
        network: Network the transfer settled on.
        payer: Address that paid.
        error_reason: Facilitator error code when ``success`` is false.
    """
    success: bool
    transaction: Optional[str] = None
    network: Optional[str] = None
    payer: Optional[str] = None
    error_reason: Optional[str] = Field(default=None, alias="errorReason")


# ============================================================================
# Client-facing result
# ============================================================================

@dataclass
class X402Response:
    """Result of ``X402Client.request``.

    Attributes:
        data: Parsed JSON body, or ``{"error": <raw text>}`` for non-JSON bodies.
        status: Final HTTP status code.
        headers: Final response headers.
        payment_response: Decoded settlement header, when the server sent one.
    """
    data: Union[Dict[str, Any], List[Any], Any]
    status: int
    headers: httpx.Headers
    payment_response: Optional[SettlementResponse] = None
