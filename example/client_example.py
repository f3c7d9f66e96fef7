"""
CipherOwl x402 Screening Client - Example

Screens one address through an x402-protected API, paying per request
with a gasless USDC authorization.

Quick Start:
    1. export EVM_PRIVATE_KEY=0x...
    2. pip install -e .
    3. python example/client_example.py
"""

import asyncio
import logging
import sys
import time

import httpx

from x402_screening import (
    X402Client,
    X402ClientConfig,
    ConfigurationError,
    PaymentAmountExceededError,
    X402ClientError,
    ScreeningResult,
)
from x402_screening.adapters.evm import value_to_amount

# Example address to screen (this one is free for testing)
TEST_ADDRESS = "0x3fdee07b0756651152bf11c8d170d72d7ebbec49"
TEST_CHAIN = "evm"
SCREENING_CONFIG = "co-high_risk_ext_hops_2"


def print_troubleshooting(error: Exception, api_url: str) -> None:
    print("\nTroubleshooting:")
    if isinstance(error, PaymentAmountExceededError):
        print("- The payment required exceeds the configured maximum")
        print("- Increase MAX_PAYMENT if you accept higher costs")
    elif isinstance(error, httpx.RequestError):
        print("- Verify API_URL is accessible")
        print(f"- Current API: {api_url}")

    print("\nGeneral checks:")
    print("- Verify EVM_PRIVATE_KEY is set correctly")
    print("- Ensure wallet has USDC on the correct network")
    print("- Check API endpoint is accessible")


async def main() -> int:
    print("CipherOwl x402 Screening Client\n")

    try:
        config = X402ClientConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("   Example: export EVM_PRIVATE_KEY=0x...", file=sys.stderr)
        return 1

    print("Initializing X402Client...")
    client = X402Client.from_config(
        config,
        logger=logging.getLogger("x402_screening.example"),
        timeout=httpx.Timeout(60.0, read=120.0),
    )

    print("Client ready")
    print(f"   Wallet:  {client.get_address()}")
    print(f"   Network: {client.get_network()}")
    print(f"   Max pay: {value_to_amount(value=config.max_payment):.2f} USDC")
    print(f"   API:     {config.api_url}\n")

    print("=" * 60)
    print("Screening Address")
    print("=" * 60)
    print(f"   Chain:   {TEST_CHAIN}")
    print(f"   Address: {TEST_ADDRESS}")
    print(f"   Config:  {SCREENING_CONFIG}\n")

    async with client:
        try:
            start = time.monotonic()
            result = await client.screen_address(
                config.api_url, TEST_CHAIN, TEST_ADDRESS, SCREENING_CONFIG
            )
            duration_ms = (time.monotonic() - start) * 1000
        except (X402ClientError, httpx.HTTPError) as e:
            print("\nScreening failed!", file=sys.stderr)
            print("-" * 40, file=sys.stderr)
            print(f"Error: {e}", file=sys.stderr)
            print_troubleshooting(e, config.api_url)
            return 1

    print(f"Request completed in {duration_ms:.0f}ms\n")

    if result.status != 200:
        print(f"Unexpected status: {result.status}", file=sys.stderr)
        print(f"Response: {result.data}", file=sys.stderr)
        return 1

    screening = ScreeningResult.model_validate(result.data)
    print("Screening Results:")
    print("-" * 40)
    print(f"   Chain:       {screening.chain}")
    print(f"   Address:     {screening.address}")
    print(f"   Risk Found:  {'YES' if screening.found_risk else 'NO'}")
    if screening.risk_score is not None:
        print(f"   Risk Score:  {screening.risk_score}")
    if result.payment_response is not None:
        print(f"   Payment Tx:  {result.payment_response.transaction}")
    print("-" * 40)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(main()))
