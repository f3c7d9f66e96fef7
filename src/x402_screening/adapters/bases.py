"""
Abstract Base Class for Payment Adapters

Defines the interface the HTTP client uses to turn a server's payment
requirements into an ``X-PAYMENT`` header value. Each settlement family
(EVM today) provides a concrete adapter.
"""

from abc import ABC, abstractmethod

from ..schemas.https import PaymentRequirements


class PaymentAdapter(ABC):
    """
    Client-side payment construction.

    Key Responsibilities:
    1. address: Expose the paying account
    2. create_payment_header: Sign an authorization for one payment option
       and encode it for transport
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Address of the paying account."""
        pass

    @abstractmethod
    async def create_payment_header(
        self,
        requirements: PaymentRequirements,
        x402_version: int,
    ) -> str:
        """
        Build, sign and encode a payment for ``requirements``.

        Args:
            requirements: The selected accepted payment option
            x402_version: Protocol version announced by the server

        Returns:
            str: Base64 header value for ``X-PAYMENT``

        Raises:
            PaymentError: If any step of construction fails. No partial
                header is ever returned.
        """
        pass
