from .adapter import EVMPaymentAdapter
from .metadata import TokenMetadataReader, Web3TokenMetadataReader
from .signers import TypedDataSigner, EthAccountSigner, normalize_private_key
from .signatures import (
    create_nonce,
    build_erc3009_typed_data,
    sign_erc3009_authorization,
)
from .standards import EIP712Domain, ERC3009TypedData
from .constants import (
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_VERSION,
    DEFAULT_MAX_PAYMENT,
    DEFAULT_NETWORK,
    AUTHORIZATION_VALIDITY_SECONDS,
    get_chain_id,
    get_network_config,
    value_to_amount,
)

__all__ = [
    "EVMPaymentAdapter",
    "TokenMetadataReader",
    "Web3TokenMetadataReader",
    "TypedDataSigner",
    "EthAccountSigner",
    "normalize_private_key",
    "create_nonce",
    "build_erc3009_typed_data",
    "sign_erc3009_authorization",
    "EIP712Domain",
    "ERC3009TypedData",
    "DEFAULT_TOKEN_NAME",
    "DEFAULT_TOKEN_VERSION",
    "DEFAULT_MAX_PAYMENT",
    "DEFAULT_NETWORK",
    "AUTHORIZATION_VALIDITY_SECONDS",
    "get_chain_id",
    "get_network_config",
    "value_to_amount",
]
