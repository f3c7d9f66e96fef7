"""
Header encoding helpers.

All base64 handling in the client goes through ``safe_base64_encode`` and
``safe_base64_decode``; the payload-specific helpers below build on them.
"""

import base64
import binascii
import json
from typing import Any, Union

from .schemas.https import PaymentPayload, SettlementResponse


def safe_base64_encode(data: Union[str, bytes]) -> str:
    """Encode string or bytes to a base64 string.

    Args:
        data: String (UTF-8 encoded first) or bytes to encode

    Returns:
        Base64 encoded string
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def safe_base64_decode(data: str) -> str:
    """Decode a base64 string to a UTF-8 string.

    Args:
        data: Base64 encoded string

    Returns:
        Decoded UTF-8 string

    Raises:
        ValueError: If ``data`` is not valid base64 or not UTF-8 after decoding
    """
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"Invalid base64 header value: {exc}") from exc


def encode_payment_header(payload: PaymentPayload) -> str:
    """Encode a payment payload to the ``X-PAYMENT`` header value."""
    return safe_base64_encode(payload.to_canonical_json())


def decode_payment_header(header: str) -> PaymentPayload:
    """Decode an ``X-PAYMENT`` header value back to a ``PaymentPayload``."""
    return PaymentPayload.model_validate_json(safe_base64_decode(header))


def decode_payment_response_header(header: str) -> SettlementResponse:
    """Decode an ``X-PAYMENT-RESPONSE`` header value.

    Args:
        header: Base64 encoded settlement response

    Returns:
        Decoded SettlementResponse
    """
    return SettlementResponse.model_validate_json(safe_base64_decode(header))


def parse_response_body(response: Any) -> Any:
    """Parse a response body as JSON without raising.

    Non-JSON bodies (HTML error pages, plain text) are wrapped as
    ``{"error": <raw text>}`` so callers can still inspect them.

    Args:
        response: ``httpx.Response`` (anything with ``.text``)

    Returns:
        Decoded JSON value, or the error-shaped wrapper
    """
    text = response.text
    try:
        return json.loads(text)
    except ValueError:
        return {"error": text}
