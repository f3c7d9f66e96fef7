"""
EVM Network Configuration

Provides the settlement network registry used when building payment
authorizations: x402 network names and CAIP-2 identifiers resolved to
EIP-155 chain ids, default public RPC endpoints for contract reads, and
the EIP-712 domain defaults used when token metadata is unavailable.
"""

from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from pydantic import BaseModel, Field


#: EIP-712 domain fallbacks used when a token's ``name()``/``version()``
#: cannot be resolved. These match Circle's USDC deployments.
DEFAULT_TOKEN_NAME: str = "USD Coin"
DEFAULT_TOKEN_VERSION: str = "2"

#: Lifetime of every signed authorization, in seconds.
AUTHORIZATION_VALIDITY_SECONDS: int = 3600

#: Default payment ceiling in USDC base units (0.10 USDC).
DEFAULT_MAX_PAYMENT: int = 100_000

DEFAULT_NETWORK: str = "base-sepolia"

USDC_DECIMALS: int = 6


class EvmNetworkConfig(BaseModel):
    """Settlement network configuration."""
    network: str = Field(..., description="x402 network name")
    chain_id: int = Field(..., ge=1, description="EIP-155 chain id")
    public_rpc_url: str = Field(..., description="Keyless public JSON-RPC endpoint")
    explorer_url: str = Field(..., description="Block explorer URL")

    @property
    def caip2(self) -> str:
        return f"eip155:{self.chain_id}"


_EVM_NETWORKS_DATA: Dict[str, Dict] = {
    "base": {
        "chain_id": 8453,
        "public_rpc_url": "https://mainnet.base.org",
        "explorer_url": "https://basescan.org",
    },
    "base-sepolia": {
        "chain_id": 84532,
        "public_rpc_url": "https://sepolia.base.org",
        "explorer_url": "https://sepolia.basescan.org",
    },
    "avalanche": {
        "chain_id": 43114,
        "public_rpc_url": "https://api.avax.network/ext/bc/C/rpc",
        "explorer_url": "https://snowtrace.io",
    },
    "avalanche-fuji": {
        "chain_id": 43113,
        "public_rpc_url": "https://api.avax-test.network/ext/bc/C/rpc",
        "explorer_url": "https://testnet.snowtrace.io",
    },
    "polygon": {
        "chain_id": 137,
        "public_rpc_url": "https://polygon-rpc.com",
        "explorer_url": "https://polygonscan.com",
    },
    "polygon-amoy": {
        "chain_id": 80002,
        "public_rpc_url": "https://rpc-amoy.polygon.technology",
        "explorer_url": "https://amoy.polygonscan.com",
    },
    "sei": {
        "chain_id": 1329,
        "public_rpc_url": "https://evm-rpc.sei-apis.com",
        "explorer_url": "https://seitrace.com",
    },
    "sei-testnet": {
        "chain_id": 1328,
        "public_rpc_url": "https://evm-rpc-testnet.sei-apis.com",
        "explorer_url": "https://seitrace.com/?chain=atlantic-2",
    },
    "iotex": {
        "chain_id": 4689,
        "public_rpc_url": "https://babel-api.mainnet.iotex.io",
        "explorer_url": "https://iotexscan.io",
    },
}

EVM_NETWORKS: Dict[str, EvmNetworkConfig] = {
    name: EvmNetworkConfig(network=name, **data)
    for name, data in _EVM_NETWORKS_DATA.items()
}


def _parse_caip2_eip155_chain_id(caip2: str) -> int:
    """
    Parses a CAIP-2 identifier (e.g., 'eip155:1' or 'eip155-1') into an integer chain ID.

    Args:
        caip2 (str): The CAIP-2 string to parse.

    Returns:
        int: The extracted EIP-155 chain ID.

    Raises:
        ValueError: If the input format is invalid, the prefix is missing,
                    or the chain ID is not a positive integer.
    """
    if not isinstance(caip2, str) or not caip2.strip():
        raise ValueError(f"Invalid input type: Expected non-empty string, got {type(caip2).__name__}")

    normalized = caip2.strip().replace("-", ":")
    parts = normalized.split(":")

    if len(parts) != 2 or parts[0] != "eip155":
        raise ValueError(
            f"Invalid CAIP-2 format: '{caip2}'. "
            f"Expected format 'eip155:<chain_id>' or 'eip155-<chain_id>'"
        )

    try:
        chain_id = int(parts[1])
    except (ValueError, TypeError) as exc:
        raise ValueError(
            f"Failed to parse chain ID from '{caip2}'. "
            f"The segment '{parts[1]}' is not a valid integer."
        ) from exc

    if chain_id <= 0:
        raise ValueError(
            f"Invalid chain ID in '{caip2}': {chain_id}. "
            f"Chain ID must be a positive integer."
        )

    return chain_id


def get_network_config(network: str) -> Optional[EvmNetworkConfig]:
    """Look up a known network by x402 name or CAIP-2 identifier.

    Returns:
        The matching EvmNetworkConfig, or None for networks outside the registry.
    """
    if not isinstance(network, str):
        return None
    key = network.strip().lower()
    if key in EVM_NETWORKS:
        return EVM_NETWORKS[key]
    if key.startswith("eip155"):
        try:
            chain_id = _parse_caip2_eip155_chain_id(key)
        except ValueError:
            return None
        for config in EVM_NETWORKS.values():
            if config.chain_id == chain_id:
                return config
    return None


def get_chain_id(network: str) -> int:
    """Resolve an x402 network name or CAIP-2 identifier to its chain id.

    CAIP-2 identifiers resolve even when the chain is not in the registry.

    Raises:
        ValueError: If the network is unknown or malformed.
    """
    config = get_network_config(network)
    if config is not None:
        return config.chain_id
    if isinstance(network, str) and network.strip().lower().startswith("eip155"):
        return _parse_caip2_eip155_chain_id(network.strip().lower())
    raise ValueError(f"Unsupported network: {network}")


def get_public_rpc_url(network: str) -> Optional[str]:
    """Default public RPC endpoint for a network, or None when unknown."""
    config = get_network_config(network)
    return config.public_rpc_url if config else None


def value_to_amount(*, value: int | str | Decimal, decimals: int = USDC_DECIMALS) -> Decimal:
    """Convert a smallest-unit integer `value` into a human-readable token amount.

    Args:
        value: Smallest-unit integer value (e.g. 1230000 for 1.23 USDC). Accepts int/str/Decimal.
        decimals: Token decimals (6 for USDC).

    Returns:
        Decimal: Human-readable amount.

    Raises:
        ValueError: If inputs are invalid.
    """
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")

    try:
        dec_value = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Invalid value: {value!r}") from e

    if dec_value < 0:
        raise ValueError("value must be non-negative")

    if dec_value != dec_value.to_integral_value():
        raise ValueError("value must be an integer in smallest units")

    return dec_value / (Decimal(10) ** decimals)
