"""
EVM Payment Adapter

Builds ``exact``-scheme payments for EVM networks: resolves the token's
EIP-712 domain, signs an EIP-3009 ``TransferWithAuthorization`` and
encodes the resulting ``PaymentPayload`` for the ``X-PAYMENT`` header.

Key Features:
    - Domain name/version from the 402 ``extra`` field, the token contract,
      or fixed defaults (never blocks payment)
    - Chain id bound from the x402 network name or CAIP-2 identifier
    - Every construction failure surfaced as a single ``PaymentError``

Dependencies:
    - web3.py: For token metadata reads (through ``TokenMetadataReader``)
    - eth_account: For EIP-712 signing (through ``TypedDataSigner``)
"""

import logging
from typing import Optional, Tuple

from ..bases import PaymentAdapter
from .constants import DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_VERSION, get_chain_id
from .metadata import TokenMetadataReader
from .signatures import sign_erc3009_authorization
from .signers import TypedDataSigner
from .standards import EIP712Domain
from ...encoding import encode_payment_header
from ...engine.exceptions import PaymentError
from ...schemas.https import PaymentPayload, PaymentRequirements


logger = logging.getLogger(__name__)

SUPPORTED_SCHEME = "exact"


class EVMPaymentAdapter(PaymentAdapter):
    """
    EVM implementation of ``PaymentAdapter``.

    Each call builds a fresh authorization (new timestamp, new nonce); the
    adapter holds no per-request state and is safe to share between
    concurrent requests.

    Attributes:
        signer: EIP-712 signer for the paying account
        metadata_reader: Optional on-chain reader for token name/version;
            when None, only ``extra`` and the defaults are used

    Example:
        adapter = EVMPaymentAdapter(EthAccountSigner("0x..."), Web3TokenMetadataReader())
        header = await adapter.create_payment_header(requirements, 1)
    """

    def __init__(
        self,
        signer: TypedDataSigner,
        metadata_reader: Optional[TokenMetadataReader] = None,
    ):
        self.signer = signer
        self.metadata_reader = metadata_reader

    @property
    def address(self) -> str:
        return self.signer.address

    async def resolve_domain_info(self, requirements: PaymentRequirements) -> Tuple[str, str]:
        """
        Resolve the token's EIP-712 domain ``name`` and ``version``.

        Order per field: the server's ``extra`` hints, then the token
        contract, then ``DEFAULT_TOKEN_NAME`` / ``DEFAULT_TOKEN_VERSION``.

        Returns:
            (name, version)
        """
        extra = requirements.extra or {}
        name = extra.get("name") or None
        version = extra.get("version") or None

        if (name is None or version is None) and self.metadata_reader is not None:
            try:
                chain_name, chain_version = await self.metadata_reader.read_name_and_version(
                    requirements.asset, requirements.network
                )
            except Exception as exc:
                logger.debug("Token metadata lookup failed for %s: %s", requirements.asset, exc)
                chain_name, chain_version = None, None
            name = name or chain_name
            version = version or chain_version

        if name is None or version is None:
            logger.debug(
                "Falling back to default EIP-712 domain for asset %s (name=%r, version=%r)",
                requirements.asset, name, version,
            )
        return str(name or DEFAULT_TOKEN_NAME), str(version or DEFAULT_TOKEN_VERSION)

    async def create_payment_payload(
        self,
        requirements: PaymentRequirements,
        x402_version: int,
    ) -> PaymentPayload:
        """
        Sign an authorization for ``requirements`` and wrap it in a ``PaymentPayload``.

        Raises:
            ValueError: On unsupported scheme or unknown network
        """
        if requirements.scheme != SUPPORTED_SCHEME:
            raise ValueError(f"Unsupported payment scheme: {requirements.scheme}")

        chain_id = get_chain_id(requirements.network)
        name, version = await self.resolve_domain_info(requirements)
        domain = EIP712Domain(
            name=name,
            version=version,
            chain_id=chain_id,
            verifying_contract=requirements.asset,
        )

        payload = await sign_erc3009_authorization(
            signer=self.signer,
            recipient=requirements.pay_to,
            value=requirements.amount,
            domain=domain,
        )
        return PaymentPayload(
            x402_version=x402_version,
            scheme=requirements.scheme,
            network=requirements.network,
            payload=payload,
        )

    async def create_payment_header(
        self,
        requirements: PaymentRequirements,
        x402_version: int,
    ) -> str:
        try:
            payload = await self.create_payment_payload(requirements, x402_version)
            header = encode_payment_header(payload)
        except Exception as exc:
            raise PaymentError(f"Failed to create payment authorization: {exc}") from exc

        logger.info(
            "Signed %s payment of %s to %s on %s",
            requirements.scheme, requirements.max_amount_required,
            requirements.pay_to, requirements.network,
        )
        return header
