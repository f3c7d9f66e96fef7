"""
EVM Off-Chain Signing Utilities

Local helpers for EIP-3009 ``transferWithAuthorization`` payments. The
cryptography itself (EIP-712 hashing, ECDSA) is done by the signer; this
module owns nonce generation, the validity window and the typed-data
layout.

Exported helpers
----------------
create_nonce
    32-byte nonce: 8-byte big-endian unix timestamp followed by 24
    random bytes.

build_erc3009_typed_data
    Wraps a ``TransferAuthorization`` in an ``ERC3009TypedData`` envelope
    without signing. Useful when signing is handled externally.

sign_erc3009_authorization
    Builds the authorization for a window starting now, signs it with a
    ``TypedDataSigner`` and returns the ``ExactEvmPayload``.
"""

import secrets
import time
from typing import Optional

from .constants import AUTHORIZATION_VALIDITY_SECONDS
from .signers import TypedDataSigner
from .standards import EIP712Domain, ERC3009TypedData
from ...schemas.https import ExactEvmPayload, TransferAuthorization


def create_nonce(timestamp: Optional[int] = None) -> str:
    """
    Create a bytes32 nonce for an EIP-3009 authorization.

    The leading 8 bytes are the big-endian unix timestamp (handy when
    reading facilitator logs); the trailing 24 bytes come from
    ``secrets`` and carry the uniqueness.

    Args:
        timestamp: Unix seconds to embed; defaults to the current time.

    Returns:
        0x-prefixed 64-character hex string.
    """
    ts = int(time.time()) if timestamp is None else int(timestamp)
    raw = ts.to_bytes(8, "big") + secrets.token_bytes(24)
    return "0x" + raw.hex()


def build_erc3009_typed_data(
    authorization: TransferAuthorization,
    *,
    domain: EIP712Domain,
) -> ERC3009TypedData:
    """
    Wrap a ``TransferAuthorization`` in an EIP-712 envelope without signing.

    Example::

        typed_data = build_erc3009_typed_data(
            authorization,
            domain=EIP712Domain("USD Coin", "2", 8453, usdc_address),
        )
        full_message = typed_data.to_dict()   # hand off to external signer
    """
    return ERC3009TypedData(domain=domain, authorization=authorization)


async def sign_erc3009_authorization(
    *,
    signer: TypedDataSigner,
    recipient: str,
    value: int,
    domain: EIP712Domain,
    now: Optional[int] = None,
    nonce: Optional[str] = None,
) -> ExactEvmPayload:
    """
    Sign an EIP-3009 ``transferWithAuthorization`` from the signer's account.

    The validity window is ``[now, now + 3600)``; ``nonce`` is generated
    with ``create_nonce`` unless given.

    Args:
        signer:    Signer whose address becomes ``from``.
        recipient: Address receiving the tokens (``to``).
        value:     Amount in the token's smallest unit.
        domain:    Token EIP-712 domain (token address + chain id).
        now:       Unix seconds to start the window at; defaults to current time.
        nonce:     Optional bytes32 hex nonce.

    Returns:
        ``ExactEvmPayload`` holding the signature and authorization.
    """
    valid_after = int(time.time()) if now is None else int(now)
    authorization = TransferAuthorization(
        authorizer=signer.address,
        recipient=recipient,
        value=value,
        valid_after=valid_after,
        valid_before=valid_after + AUTHORIZATION_VALIDITY_SECONDS,
        nonce=nonce if nonce is not None else create_nonce(valid_after),
    )

    typed_data = build_erc3009_typed_data(authorization, domain=domain)
    signature = await signer.sign_typed_data(typed_data.to_dict())

    return ExactEvmPayload(signature=signature, authorization=authorization)
