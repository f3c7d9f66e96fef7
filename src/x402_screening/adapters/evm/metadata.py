"""
Token Metadata Resolution

Reads the EIP-712 domain ``name()`` and ``version()`` of a token contract.
Both reads are best-effort: a failing RPC, a non-standard token or an
unknown network yields ``None`` so that payment construction can fall
back to fixed defaults instead of failing.

Dependencies:
    - web3.py: Async contract calls against a JSON-RPC endpoint
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from web3 import AsyncWeb3

from .constants import get_public_rpc_url
from .ERC20_ABI import get_metadata_abi


logger = logging.getLogger(__name__)


class TokenMetadataReader(ABC):
    """Read capability for a token's EIP-712 domain fields."""

    @abstractmethod
    async def read_name_and_version(
        self,
        asset: str,
        network: str,
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Fetch ``name()`` and ``version()`` from the token contract.

        Implementations must not raise; unresolved fields are ``None``.
        """
        pass


class Web3TokenMetadataReader(TokenMetadataReader):
    """
    ``TokenMetadataReader`` backed by ``AsyncWeb3``.

    The RPC endpoint is chosen per call: the explicit ``rpc_url`` when
    given, otherwise the public endpoint registered for the network.

    Example:
        reader = Web3TokenMetadataReader()
        name, version = await reader.read_name_and_version(
            "0x036CbD53842c5426634e7929541eC2318f3dCF7e", "base-sepolia"
        )
    """

    def __init__(self, rpc_url: Optional[str] = None, request_timeout: int = 10):
        """
        Args:
            rpc_url: Optional JSON-RPC endpoint used for every network.
            request_timeout: Per-call HTTP timeout in seconds.
        """
        self._rpc_url = rpc_url
        self._request_timeout = request_timeout

    def _get_web3_instance(self, network: str) -> Optional[AsyncWeb3]:
        rpc_url = self._rpc_url or get_public_rpc_url(network)
        if not rpc_url:
            return None
        return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": self._request_timeout}
        ))

    async def read_name_and_version(
        self,
        asset: str,
        network: str,
    ) -> Tuple[Optional[str], Optional[str]]:
        w3 = self._get_web3_instance(network)
        if w3 is None:
            logger.debug("No RPC endpoint for network %s; skipping token metadata lookup", network)
            return None, None

        try:
            contract = w3.eth.contract(
                address=AsyncWeb3.to_checksum_address(asset),
                abi=get_metadata_abi(),
            )
        except Exception as exc:
            logger.debug("Cannot build contract for asset %s: %s", asset, exc)
            return None, None

        name, version = await asyncio.gather(
            self._call_string(contract.functions.name(), "name", asset),
            self._call_string(contract.functions.version(), "version", asset),
        )
        return name, version

    @staticmethod
    async def _call_string(function, label: str, asset: str) -> Optional[str]:
        try:
            value = await function.call()
        except Exception as exc:
            logger.debug("%s() lookup failed for %s: %s", label, asset, exc)
            return None
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
