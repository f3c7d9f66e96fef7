"""
Tests for EVMPaymentAdapter: domain resolution, payload contents and
error wrapping.
"""

import pytest

from x402_screening.adapters.evm import (
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_VERSION,
    EVMPaymentAdapter,
)
from x402_screening.encoding import decode_payment_header
from x402_screening.engine.exceptions import PaymentError
from x402_screening.schemas import PaymentRequirements

from x402_mocks import (
    MOCK_AMOUNT_5_CENTS,
    MOCK_CHAIN_ID_BASE_SEPOLIA,
    MOCK_PAY_TO,
    MOCK_PAYER_ADDRESS,
    MOCK_SIGNATURE,
    MOCK_USDC_BASE_SEPOLIA,
    FakeMetadataReader,
    FakeSigner,
    make_requirements,
)


def requirements(**overrides) -> PaymentRequirements:
    return PaymentRequirements.model_validate(make_requirements(**overrides))


# ============================================================================
# Domain resolution
# ============================================================================

@pytest.mark.asyncio
async def test_domain_from_extra_skips_metadata_reader(fake_signer):
    reader = FakeMetadataReader(name="OnChain", version="9")
    adapter = EVMPaymentAdapter(fake_signer, reader)

    name, version = await adapter.resolve_domain_info(requirements())

    assert (name, version) == ("USDC", "2")
    assert reader.calls == []


@pytest.mark.asyncio
async def test_domain_falls_back_to_metadata_reader(fake_signer):
    reader = FakeMetadataReader(name="USD Coin", version="2")
    adapter = EVMPaymentAdapter(fake_signer, reader)

    name, version = await adapter.resolve_domain_info(requirements(extra=None))

    assert (name, version) == ("USD Coin", "2")
    assert reader.calls == [(MOCK_USDC_BASE_SEPOLIA, "base-sepolia")]


@pytest.mark.asyncio
async def test_domain_mixes_extra_and_reader_per_field(fake_signer):
    reader = FakeMetadataReader(name="ignored", version="7")
    adapter = EVMPaymentAdapter(fake_signer, reader)

    name, version = await adapter.resolve_domain_info(requirements(extra={"name": "Bridged USDC"}))

    assert (name, version) == ("Bridged USDC", "7")


@pytest.mark.asyncio
async def test_domain_defaults_when_reader_returns_nothing(fake_signer):
    adapter = EVMPaymentAdapter(fake_signer, FakeMetadataReader())

    name, version = await adapter.resolve_domain_info(requirements(extra={}))

    assert (name, version) == (DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_VERSION)


@pytest.mark.asyncio
async def test_domain_defaults_when_reader_raises(fake_signer):
    reader = FakeMetadataReader(fail_with=ConnectionError("rpc down"))
    adapter = EVMPaymentAdapter(fake_signer, reader)

    name, version = await adapter.resolve_domain_info(requirements(extra=None))

    assert (name, version) == (DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_VERSION)


@pytest.mark.asyncio
async def test_domain_defaults_without_reader(fake_adapter):
    name, version = await fake_adapter.resolve_domain_info(requirements(extra=None))
    assert (name, version) == ("USD Coin", "2")


# ============================================================================
# Payload construction
# ============================================================================

@pytest.mark.asyncio
async def test_payload_matches_requirements(fake_adapter, fake_signer):
    header = await fake_adapter.create_payment_header(requirements(), 1)
    payload = decode_payment_header(header)

    assert payload.x402_version == 1
    assert payload.scheme == "exact"
    assert payload.network == "base-sepolia"
    assert payload.payload.signature == MOCK_SIGNATURE

    auth = payload.payload.authorization
    assert auth.authorizer == MOCK_PAYER_ADDRESS
    assert auth.recipient == MOCK_PAY_TO
    assert auth.value == MOCK_AMOUNT_5_CENTS

    (message,) = fake_signer.signed_messages
    assert message["domain"]["chainId"] == MOCK_CHAIN_ID_BASE_SEPOLIA
    assert message["domain"]["verifyingContract"] == MOCK_USDC_BASE_SEPOLIA


@pytest.mark.asyncio
async def test_payload_accepts_caip2_network(fake_adapter, fake_signer):
    await fake_adapter.create_payment_header(requirements(network="eip155:8453"), 1)

    (message,) = fake_signer.signed_messages
    assert message["domain"]["chainId"] == 8453


@pytest.mark.asyncio
async def test_payload_echoes_server_version(fake_adapter):
    header = await fake_adapter.create_payment_header(requirements(), 2)
    assert decode_payment_header(header).x402_version == 2


@pytest.mark.asyncio
async def test_address_comes_from_signer(fake_adapter):
    assert fake_adapter.address == MOCK_PAYER_ADDRESS


# ============================================================================
# Error wrapping
# ============================================================================

@pytest.mark.asyncio
async def test_unsupported_scheme_raises_payment_error(fake_adapter, fake_signer):
    with pytest.raises(PaymentError) as exc_info:
        await fake_adapter.create_payment_header(requirements(scheme="upto"), 1)

    assert "upto" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert fake_signer.signed_messages == []


@pytest.mark.asyncio
async def test_unknown_network_raises_payment_error(fake_adapter, fake_signer):
    with pytest.raises(PaymentError, match="Unsupported network"):
        await fake_adapter.create_payment_header(requirements(network="solana"), 1)

    assert fake_signer.signed_messages == []


@pytest.mark.asyncio
async def test_signer_failure_raises_payment_error():
    adapter = EVMPaymentAdapter(FakeSigner(fail_with=RuntimeError("hsm unavailable")))

    with pytest.raises(PaymentError, match="hsm unavailable") as exc_info:
        await adapter.create_payment_header(requirements(), 1)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
