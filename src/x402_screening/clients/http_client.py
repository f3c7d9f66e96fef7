"""
HTTP 402 Payment Flow Middleware

Provides a transparent middleware layer for httpx that automatically handles
402 Payment Required responses by signing an EIP-3009 authorization and
retrying the request with an ``X-PAYMENT`` header.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..adapters.bases import PaymentAdapter
from ..adapters.evm.constants import DEFAULT_MAX_PAYMENT
from ..encoding import parse_response_body
from ..engine.exceptions import (
    ConfigurationError,
    PaymentAmountExceededError,
    ProtocolError,
    SettlementError,
)
from ..schemas.https import (
    ClientRequestHeader,
    PaymentRequiredResponse,
    PaymentRequirements,
)


logger = logging.getLogger(__name__)

PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"


class Http402Client(httpx.AsyncClient):
    """
    Extended httpx.AsyncClient with automatic 402 payment handling.

    This client extends httpx.AsyncClient and automatically handles 402 Payment
    Required status codes by:
    1. Parsing payment requirements and selecting the first accepted option
    2. Checking the amount against the configured payment ceiling
    3. Signing a transfer authorization through the payment adapter
    4. Retrying the original request once with the ``X-PAYMENT`` header

    A retry that does not succeed raises ``SettlementError``; a second 402
    is never paid.

    Fully compatible with httpx.AsyncClient - supports all methods, properties,
    and can be used as an async context manager.

    Usage:
        ```python
        adapter = EVMPaymentAdapter(EthAccountSigner(private_key))
        async with Http402Client(adapter, max_payment=100_000) as client:
            response = await client.get("https://api.example.com/data")
        ```
    """

    def __init__(
        self,
        adapter: PaymentAdapter,
        max_payment: Optional[int] = DEFAULT_MAX_PAYMENT,
        **kwargs
    ):
        """
        Initialize client with a payment adapter.

        Args:
            adapter: PaymentAdapter that builds the ``X-PAYMENT`` header
            max_payment: Largest amount (smallest unit) the client will pay
                per request; None disables the check
            **kwargs: All standard httpx.AsyncClient arguments (timeout, headers, transport, etc.)

        Raises:
            ConfigurationError: If ``max_payment`` is negative
        """
        if max_payment is not None and max_payment < 0:
            raise ConfigurationError(f"max_payment must be non-negative, got {max_payment}")
        super().__init__(**kwargs)
        self._adapter = adapter
        self._max_payment = max_payment

    @property
    def max_payment(self) -> Optional[int]:
        return self._max_payment

    # =========================================================================
    # Override httpx.AsyncClient.request to add 402 handling
    # =========================================================================

    async def request(
        self,
        method: str,
        url: httpx._types.URLTypes,
        **kwargs
    ) -> httpx.Response:
        """
        Execute HTTP request with automatic 402 handling.

        Overrides httpx.AsyncClient.request() to intercept 402 responses.
        All other httpx methods (get, post, etc.) automatically use this.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: All standard httpx arguments

        Returns:
            httpx.Response object

        Raises:
            ProtocolError: 402 body carries no usable payment option
            PaymentError: Authorization could not be built
            SettlementError: Paid retry did not return a 2xx status
        """
        response = await super().request(method, url, **kwargs)

        if response.status_code != 402:
            return response

        logger.debug("Payment required for %s %s", method, url)
        payment_header = await self._handle_402_response(response)

        kwargs['headers'] = self._inject_payment_header(kwargs.get('headers'), payment_header)
        retry = await super().request(method, url, **kwargs)

        if not retry.is_success:
            body = parse_response_body(retry)
            logger.error("Paid request to %s failed with status %s", url, retry.status_code)
            raise SettlementError(retry.status_code, body)

        return retry

    # =========================================================================
    # Core 402 Handling Logic
    # =========================================================================

    async def _handle_402_response(self, response: httpx.Response) -> str:
        """
        Process 402 Payment Required response.

        Args:
            response: 402 HTTP response

        Returns:
            Encoded ``X-PAYMENT`` header value
        """
        payload = self._parse_402_payload(response)
        requirements = self._select_payment_requirements(payload)
        self._check_max_payment(requirements)
        return await self._adapter.create_payment_header(requirements, payload.x402_version)

    def _parse_402_payload(self, response: httpx.Response) -> PaymentRequiredResponse:
        """
        Parse payment requirements from a 402 response.

        Raises:
            ProtocolError: Body is not JSON, fails validation, or lists no options
        """
        try:
            data = response.json()
        except ValueError as exc:
            raise ProtocolError(f"402 response body is not valid JSON: {response.text!r}") from exc

        try:
            payload = PaymentRequiredResponse.model_validate(data)
        except ValidationError as exc:
            raise ProtocolError(f"Invalid 402 payment requirements: {exc}") from exc

        if not payload.accepts:
            raise ProtocolError("402 response did not include any accepted payment options")
        return payload

    def _select_payment_requirements(self, payload: PaymentRequiredResponse) -> PaymentRequirements:
        """First accepted option; the server lists options in preference order."""
        return payload.accepts[0]

    def _check_max_payment(self, requirements: PaymentRequirements) -> None:
        if self._max_payment is not None and requirements.amount > self._max_payment:
            raise PaymentAmountExceededError(requirements.amount, self._max_payment)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _inject_payment_header(
        self,
        headers: Optional[httpx._types.HeaderTypes],
        payment_header: str,
    ) -> httpx.Headers:
        """
        Add the payment headers to the caller's headers.

        Caller headers are kept; only ``X-PAYMENT`` and
        ``Access-Control-Expose-Headers`` are set.

        Args:
            headers: Existing headers (dict, list of pairs, httpx.Headers or None)
            payment_header: Encoded payment payload

        Returns:
            Merged httpx.Headers
        """
        header_model = ClientRequestHeader(
            x_payment=payment_header,
            expose_headers=PAYMENT_RESPONSE_HEADER,
        )
        merged = httpx.Headers(headers)
        merged.update(
            header_model.model_dump(by_alias=True, include={"x_payment", "expose_headers"})
        )
        return merged
