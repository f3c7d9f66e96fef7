"""
Client Configuration

Environment-aware settings for ``X402Client``. Values come from explicit
arguments or from the process environment (a ``.env`` file is loaded with
python-dotenv when present).

Environment Variables:
    - EVM_PRIVATE_KEY: Payer's EVM private key (required)
    - NETWORK: Settlement network (default ``base``)
    - MAX_PAYMENT: Payment ceiling in USDC base units (default ``1000000`` = 1.00 USDC)
    - RPC_URL: Optional JSON-RPC endpoint for token metadata reads
    - API_URL: Screening API base URL (default ``https://api.cipherowl.ai``)
"""

import os
from typing import Optional

import dotenv
import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from .adapters.evm.constants import get_chain_id
from .adapters.evm.signers import normalize_private_key
from .engine.exceptions import ConfigurationError


DEFAULT_API_URL = "https://api.cipherowl.ai"
DEFAULT_ENV_NETWORK = "base"
DEFAULT_ENV_MAX_PAYMENT = 1_000_000


def validate_endpoint(url: str, field_name: str = "url") -> str:
    """
    Check that ``url`` is an absolute http(s) URL.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        ConfigurationError: If the URL is empty, relative or uses another scheme.
    """
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError(f"{field_name} must be a non-empty URL")
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Malformed {field_name}: {url!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(f"Malformed {field_name}: {url!r} (expected http(s)://host)")
    return url.strip()


class X402ClientConfig(BaseModel):
    """
    Settings needed to build an ``X402Client``.

    Attributes:
        private_key: Payer's private key, normalized to a 0x prefix
        network: x402 network name or CAIP-2 id used for settlement
        max_payment: Largest payment accepted per request (smallest unit)
        rpc_url: Optional RPC endpoint; public endpoints are used otherwise
        api_url: Base URL of the paid API
    """

    private_key: str = Field(..., repr=False)
    network: str = DEFAULT_ENV_NETWORK
    max_payment: int = Field(default=DEFAULT_ENV_MAX_PAYMENT, ge=0)
    rpc_url: Optional[str] = None
    api_url: str = DEFAULT_API_URL

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, v: str) -> str:
        return normalize_private_key(v)

    @field_validator("network")
    @classmethod
    def _check_network(cls, v: str) -> str:
        get_chain_id(v)
        return v

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_endpoint(v, "rpc_url") if v else None

    @field_validator("api_url")
    @classmethod
    def _check_api_url(cls, v: str) -> str:
        return validate_endpoint(v, "api_url").rstrip("/")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "X402ClientConfig":
        """
        Build the configuration from environment variables.

        Args:
            env_file: Optional path of a .env file; the default search is
                used when omitted. Existing environment variables win.

        Raises:
            ConfigurationError: If EVM_PRIVATE_KEY is missing or any value is malformed
        """
        dotenv.load_dotenv(env_file)

        private_key = os.getenv("EVM_PRIVATE_KEY")
        if not private_key:
            raise ConfigurationError(
                "EVM_PRIVATE_KEY environment variable required (e.g. export EVM_PRIVATE_KEY=0x...)"
            )

        max_payment_raw = os.getenv("MAX_PAYMENT", str(DEFAULT_ENV_MAX_PAYMENT))
        try:
            max_payment = int(max_payment_raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"MAX_PAYMENT must be an integer amount in base units, got {max_payment_raw!r}"
            ) from exc

        return cls.build(
            private_key=private_key,
            network=os.getenv("NETWORK") or DEFAULT_ENV_NETWORK,
            max_payment=max_payment,
            rpc_url=os.getenv("RPC_URL") or None,
            api_url=os.getenv("API_URL") or DEFAULT_API_URL,
        )

    @classmethod
    def build(cls, **values) -> "X402ClientConfig":
        """
        Validate ``values`` and convert every failure to ``ConfigurationError``.
        """
        try:
            return cls(**values)
        except ConfigurationError:
            raise
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid client configuration: {exc}") from exc
