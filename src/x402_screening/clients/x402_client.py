"""
X402Client - Client for x402-protected APIs

Wraps ``Http402Client`` behind a small facade: build it from a private key
and a settlement network, make requests, and get back parsed
``X402Response`` objects instead of raw httpx responses.
"""

import logging
from typing import Any, Optional

import httpx

from .http_client import Http402Client, PAYMENT_RESPONSE_HEADER
from ..adapters.evm import (
    DEFAULT_MAX_PAYMENT,
    DEFAULT_NETWORK,
    EVMPaymentAdapter,
    EthAccountSigner,
    Web3TokenMetadataReader,
    get_chain_id,
)
from ..adapters.bases import PaymentAdapter
from ..config import X402ClientConfig, validate_endpoint
from ..encoding import decode_payment_response_header, parse_response_body
from ..engine.exceptions import ConfigurationError
from ..schemas.https import SettlementResponse, X402Response


SCREENING_PATH = "/api-402/screen/v1/chains/{chain}/addresses/{address}"


def build_screening_url(
    api_base: str,
    chain: str,
    address: str,
    config: Optional[str] = None,
) -> str:
    """
    Build the screening endpoint URL.

    Args:
        api_base: Base URL of the screening API (a path prefix is kept)
        chain: Chain family (evm, bitcoin, solana, tron)
        address: Address to screen
        config: Optional screening configuration name, sent as ``?config=``

    Raises:
        ConfigurationError: If ``api_base`` is not an absolute http(s) URL
    """
    base = httpx.URL(validate_endpoint(api_base, "api_base"))
    path = base.path.rstrip("/") + SCREENING_PATH.format(chain=chain, address=address)
    url = base.copy_with(path=path)
    if config:
        url = url.copy_merge_params({"config": config})
    return str(url)


class X402Client:
    """
    Client for x402-protected APIs.

    Usage:
        ```python
        client = X402Client.create(private_key, network="base", max_payment=1_000_000)
        async with client:
            result = await client.screen_address(
                "https://api.cipherowl.ai", "evm", "0x3fdee07b0756651152bf11c8d170d72d7ebbec49"
            )
            print(result.status, result.data)
        ```
    """

    def __init__(
        self,
        http_client: Http402Client,
        network: str,
        address: str,
        logger: Optional[logging.Logger] = None,
    ):
        self._http = http_client
        self._network = network
        self._address = address
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def create(
        cls,
        private_key: str,
        network: str = DEFAULT_NETWORK,
        max_payment: Optional[int] = DEFAULT_MAX_PAYMENT,
        rpc_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        adapter: Optional[PaymentAdapter] = None,
        **httpx_kwargs: Any,
    ) -> "X402Client":
        """
        Create a configured client.

        Args:
            private_key: EVM private key (with or without 0x prefix); must hold
                USDC on the settlement network
            network: Settlement network; defaults to base-sepolia (testnet)
            max_payment: Ceiling in USDC base units; defaults to 0.10 USDC
            rpc_url: Optional RPC endpoint for token metadata reads
            logger: Optional logger; defaults to this module's logger
            adapter: Optional payment adapter overriding the default EVM one
            **httpx_kwargs: Passed to ``httpx.AsyncClient`` (timeout, transport, ...)

        Raises:
            ConfigurationError: On a malformed key, RPC URL or unsupported network
        """
        try:
            get_chain_id(network)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        if rpc_url is not None:
            rpc_url = validate_endpoint(rpc_url, "rpc_url")

        if adapter is None:
            signer = EthAccountSigner(private_key)
            adapter = EVMPaymentAdapter(signer, Web3TokenMetadataReader(rpc_url=rpc_url))

        http_client = Http402Client(adapter, max_payment=max_payment, **httpx_kwargs)
        return cls(http_client, network, adapter.address, logger)

    @classmethod
    def from_config(
        cls,
        config: X402ClientConfig,
        logger: Optional[logging.Logger] = None,
        **httpx_kwargs: Any,
    ) -> "X402Client":
        """Create a client from an ``X402ClientConfig``."""
        return cls.create(
            config.private_key,
            network=config.network,
            max_payment=config.max_payment,
            rpc_url=config.rpc_url,
            logger=logger,
            **httpx_kwargs,
        )

    def get_address(self) -> str:
        """Wallet address that pays for requests."""
        return self._address

    def get_network(self) -> str:
        """Configured settlement network."""
        return self._network

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[httpx._types.HeaderTypes] = None,
        **kwargs: Any,
    ) -> X402Response:
        """
        Make a request with automatic x402 payment handling.

        ``Content-Type: application/json`` is sent unless the caller sets it.

        Args:
            url: API endpoint URL
            method: HTTP method
            headers: Extra request headers
            **kwargs: Standard httpx request options (json, params, content, ...)

        Returns:
            X402Response with parsed data, status and headers

        Raises:
            ProtocolError, PaymentError, SettlementError: See ``Http402Client.request``
        """
        self._logger.debug("Making request to %s", url)

        merged = httpx.Headers({"Content-Type": "application/json"})
        merged.update(httpx.Headers(headers))

        response = await self._http.request(method, url, headers=merged, **kwargs)

        return X402Response(
            data=parse_response_body(response),
            status=response.status_code,
            headers=response.headers,
            payment_response=self._decode_payment_response(response.headers),
        )

    async def screen_address(
        self,
        api_base: str,
        chain: str,
        address: str,
        config: Optional[str] = None,
    ) -> X402Response:
        """
        Screen a blockchain address for risk.

        Args:
            api_base: Base URL of the screening API
            chain: Blockchain identifier (evm, bitcoin, solana, tron)
            address: Address to screen
            config: Optional screening configuration

        Returns:
            X402Response whose ``data`` matches ``ScreeningResult`` on success
        """
        url = build_screening_url(api_base, chain, address, config)
        return await self.request(url)

    def _decode_payment_response(self, headers: httpx.Headers) -> Optional[SettlementResponse]:
        header = headers.get(PAYMENT_RESPONSE_HEADER)
        if not header:
            return None
        try:
            return decode_payment_response_header(header)
        except ValueError as exc:
            self._logger.warning("Ignoring undecodable %s header: %s", PAYMENT_RESPONSE_HEADER, exc)
            return None

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "X402Client":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._http.__aexit__(*exc_info)
