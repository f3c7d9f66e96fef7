"""
Typed-data signer interface and its eth_account implementation.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict

from eth_account import Account
from eth_utils import to_hex

from ...engine.exceptions import ConfigurationError


_PRIVATE_KEY_HEX = re.compile(r"^0x[0-9a-fA-F]{64}$")


def normalize_private_key(private_key: str) -> str:
    """Return ``private_key`` with a ``0x`` prefix and surrounding whitespace removed.

    Raises:
        ConfigurationError: If the key is not 32 bytes of hex.
    """
    if not isinstance(private_key, str) or not private_key.strip():
        raise ConfigurationError("EVM private key is required")

    key = private_key.strip()
    if not key.startswith(("0x", "0X")):
        key = f"0x{key}"
    key = "0x" + key[2:]

    if not _PRIVATE_KEY_HEX.match(key):
        raise ConfigurationError(
            "Malformed EVM private key: expected 32 bytes of hex (64 characters, optional 0x prefix)"
        )
    return key


class TypedDataSigner(ABC):
    """
    Abstract base class for EIP-712 signers.

    The payment adapter only needs the signer's address and one signing
    operation, so tests can swap in a deterministic fake.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address of the signing account"""
        pass

    @abstractmethod
    async def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        """
        Sign EIP-712 typed data.

        Args:
            full_message: Dict with ``types``, ``primaryType``, ``domain`` and ``message``

        Returns:
            0x-prefixed 65-byte signature (r || s || v) as hex
        """
        pass


class EthAccountSigner(TypedDataSigner):
    """Signs in-process with a local private key via ``eth_account``."""

    def __init__(self, private_key: str) -> None:
        key = normalize_private_key(private_key)
        try:
            self._account = Account.from_key(key)
        except Exception as exc:
            raise ConfigurationError(f"Invalid EVM private key: {exc}") from exc

    @property
    def address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        signed = self._account.sign_typed_data(full_message=full_message)
        return to_hex(signed.signature)
