from .bases import PaymentAdapter
from .evm import (
    EVMPaymentAdapter,
    TokenMetadataReader,
    Web3TokenMetadataReader,
    TypedDataSigner,
    EthAccountSigner,
)

__all__ = [
    "PaymentAdapter",
    "EVMPaymentAdapter",
    "TokenMetadataReader",
    "Web3TokenMetadataReader",
    "TypedDataSigner",
    "EthAccountSigner",
]
