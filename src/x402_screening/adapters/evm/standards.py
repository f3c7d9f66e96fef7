"""
EIP-712 typed-data structures for EIP-3009 transfers.

The payment header carries a ``TransferAuthorization`` (pydantic, wire
format); signing needs the same fields laid out as EIP-712 typed data.
This module bridges the two.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from ...schemas.https import TransferAuthorization


EIP712_DOMAIN_TYPE: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

TRANSFER_WITH_AUTHORIZATION_TYPE: List[Dict[str, str]] = [
    {"name": "from", "type": "address"},
    {"name": "to", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "validAfter", "type": "uint256"},
    {"name": "validBefore", "type": "uint256"},
    {"name": "nonce", "type": "bytes32"},
]


@dataclass(frozen=True)
class EIP712Domain:
    """
    Signing domain of an EIP-3009 token.

    ``verifying_contract`` is the token itself and ``chain_id`` the
    settlement chain, so a signature is only valid for one asset on one
    chain.
    """
    name: str
    version: str
    chain_id: int
    verifying_contract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


@dataclass
class ERC3009TypedData:
    """
    ``TransferWithAuthorization`` typed data ready for an EIP-712 signer.

    Attributes:
        domain: Token signing domain.
        authorization: Authorization fields to sign.
        primary_type: EIP-712 primary type name.
        types: EIP-712 type definitions.
    """
    domain: EIP712Domain
    authorization: TransferAuthorization

    primary_type: str = "TransferWithAuthorization"
    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: {
            "EIP712Domain": list(EIP712_DOMAIN_TYPE),
            "TransferWithAuthorization": list(TRANSFER_WITH_AUTHORIZATION_TYPE),
        }
    )

    def message(self) -> Dict[str, Any]:
        """Message section with integer uint256 values and EIP-3009 key names."""
        auth = self.authorization
        return {
            "from": auth.authorizer,
            "to": auth.recipient,
            "value": auth.value,
            "validAfter": auth.valid_after,
            "validBefore": auth.valid_before,
            "nonce": auth.nonce,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Full message in the layout taken by ``Account.sign_typed_data(full_message=...)``."""
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message(),
        }
