"""
Tests for Http402Client: the 402 -> pay -> retry flow over a mocked transport.
"""

import json

import httpx
import pytest

from x402_screening.clients import Http402Client
from x402_screening.clients.http_client import PAYMENT_RESPONSE_HEADER
from x402_screening.encoding import decode_payment_header
from x402_screening.engine.exceptions import (
    ConfigurationError,
    PaymentAmountExceededError,
    PaymentError,
    ProtocolError,
    SettlementError,
)

from x402_mocks import (
    MOCK_AMOUNT_5_CENTS,
    MOCK_AMOUNT_50_CENTS,
    MOCK_OTHER_PAY_TO,
    MOCK_PAY_TO,
    MOCK_RESOURCE_URL,
    RecordingTransport,
    make_402_body,
    make_requirements,
    payment_required_then,
)


def make_client(adapter, transport, **kwargs) -> Http402Client:
    return Http402Client(adapter, transport=transport, **kwargs)


# ============================================================================
# Pass-through
# ============================================================================

@pytest.mark.asyncio
async def test_non_402_response_is_returned_unchanged(fake_adapter, fake_signer):
    transport = RecordingTransport([httpx.Response(200, json={"ok": True})])

    async with make_client(fake_adapter, transport) as client:
        response = await client.get(MOCK_RESOURCE_URL)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert len(transport.requests) == 1
    assert "X-PAYMENT" not in transport.requests[0].headers
    assert fake_signer.signed_messages == []


@pytest.mark.asyncio
async def test_error_status_without_402_is_not_paid(fake_adapter, fake_signer):
    transport = RecordingTransport([httpx.Response(404, text="not found")])

    async with make_client(fake_adapter, transport) as client:
        response = await client.get(MOCK_RESOURCE_URL)

    assert response.status_code == 404
    assert fake_signer.signed_messages == []


# ============================================================================
# Paid retry
# ============================================================================

@pytest.mark.asyncio
async def test_402_is_paid_and_retried_once(fake_adapter, fake_signer):
    transport = payment_required_then(httpx.Response(200, json={"foundRisk": False}))

    async with make_client(fake_adapter, transport) as client:
        response = await client.get(MOCK_RESOURCE_URL, headers={"X-Request-Id": "abc"})

    assert response.status_code == 200
    assert response.json() == {"foundRisk": False}
    assert len(transport.requests) == 2
    assert len(fake_signer.signed_messages) == 1

    first, retry = transport.requests
    assert "X-PAYMENT" not in first.headers
    assert retry.headers["X-Request-Id"] == "abc"
    assert retry.headers["Access-Control-Expose-Headers"] == PAYMENT_RESPONSE_HEADER

    payload = decode_payment_header(retry.headers["X-PAYMENT"])
    assert payload.scheme == "exact"
    assert payload.network == "base-sepolia"
    assert payload.payload.authorization.recipient == MOCK_PAY_TO
    assert payload.payload.authorization.value == MOCK_AMOUNT_5_CENTS


@pytest.mark.asyncio
async def test_first_accepted_option_is_selected(fake_adapter):
    body = make_402_body(accepts=[
        make_requirements(payTo=MOCK_PAY_TO),
        make_requirements(payTo=MOCK_OTHER_PAY_TO, maxAmountRequired="1"),
    ])
    transport = payment_required_then(httpx.Response(200, json={}), body=body)

    async with make_client(fake_adapter, transport) as client:
        await client.get(MOCK_RESOURCE_URL)

    payload = decode_payment_header(transport.requests[1].headers["X-PAYMENT"])
    assert payload.payload.authorization.recipient == MOCK_PAY_TO


@pytest.mark.asyncio
async def test_post_body_is_resent_on_retry(fake_adapter):
    transport = payment_required_then(httpx.Response(201, json={"id": 7}))

    async with make_client(fake_adapter, transport) as client:
        response = await client.post(MOCK_RESOURCE_URL, json={"address": "0xabc"})

    assert response.status_code == 201
    first, retry = transport.requests
    assert retry.method == "POST"
    assert json.loads(retry.content) == json.loads(first.content) == {"address": "0xabc"}


@pytest.mark.asyncio
async def test_each_402_gets_a_fresh_nonce(fake_adapter):
    transport = RecordingTransport([
        httpx.Response(402, json=make_402_body()),
        httpx.Response(200, json={}),
        httpx.Response(402, json=make_402_body()),
        httpx.Response(200, json={}),
    ])

    async with make_client(fake_adapter, transport) as client:
        await client.get(MOCK_RESOURCE_URL)
        await client.get(MOCK_RESOURCE_URL)

    nonces = {
        decode_payment_header(request.headers["X-PAYMENT"]).payload.authorization.nonce
        for request in transport.requests
        if "X-PAYMENT" in request.headers
    }
    assert len(nonces) == 2


@pytest.mark.asyncio
async def test_payment_within_ceiling_is_signed(fake_adapter):
    transport = payment_required_then(httpx.Response(200, json={}))

    async with make_client(fake_adapter, transport, max_payment=MOCK_AMOUNT_5_CENTS) as client:
        response = await client.get(MOCK_RESOURCE_URL)

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_no_ceiling_when_max_payment_is_none(fake_adapter):
    body = make_402_body(accepts=[make_requirements(maxAmountRequired=str(10 ** 12))])
    transport = payment_required_then(httpx.Response(200, json={}), body=body)

    async with make_client(fake_adapter, transport, max_payment=None) as client:
        response = await client.get(MOCK_RESOURCE_URL)

    assert response.status_code == 200


# ============================================================================
# Failures
# ============================================================================

@pytest.mark.asyncio
async def test_amount_over_ceiling_is_refused(fake_adapter, fake_signer):
    body = make_402_body(accepts=[make_requirements(maxAmountRequired=str(MOCK_AMOUNT_50_CENTS))])
    transport = RecordingTransport([httpx.Response(402, json=body)])

    async with make_client(fake_adapter, transport, max_payment=100_000) as client:
        with pytest.raises(PaymentAmountExceededError) as exc_info:
            await client.get(MOCK_RESOURCE_URL)

    assert isinstance(exc_info.value, PaymentError)
    assert exc_info.value.required == MOCK_AMOUNT_50_CENTS
    assert exc_info.value.maximum == 100_000
    assert len(transport.requests) == 1
    assert fake_signer.signed_messages == []


@pytest.mark.asyncio
async def test_empty_accepts_raises_protocol_error(fake_adapter, fake_signer):
    transport = RecordingTransport([httpx.Response(402, json=make_402_body(accepts=[]))])

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(ProtocolError):
            await client.get(MOCK_RESOURCE_URL)

    assert len(transport.requests) == 1
    assert fake_signer.signed_messages == []


@pytest.mark.asyncio
async def test_missing_accepts_raises_protocol_error(fake_adapter):
    transport = RecordingTransport([httpx.Response(402, json={"x402Version": 1})])

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(ProtocolError):
            await client.get(MOCK_RESOURCE_URL)


@pytest.mark.asyncio
async def test_non_json_402_raises_protocol_error(fake_adapter):
    transport = RecordingTransport([httpx.Response(402, text="Payment Required")])

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(ProtocolError, match="not valid JSON"):
            await client.get(MOCK_RESOURCE_URL)

    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_malformed_requirement_raises_protocol_error(fake_adapter):
    broken = make_requirements()
    del broken["asset"]
    transport = RecordingTransport([httpx.Response(402, json=make_402_body(accepts=[broken]))])

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(ProtocolError):
            await client.get(MOCK_RESOURCE_URL)


@pytest.mark.asyncio
async def test_failed_retry_raises_settlement_error(fake_adapter):
    transport = payment_required_then(httpx.Response(500, json={"error": "facilitator unavailable"}))

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(SettlementError) as exc_info:
            await client.get(MOCK_RESOURCE_URL)

    assert exc_info.value.status == 500
    assert exc_info.value.body == {"error": "facilitator unavailable"}
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_second_402_is_not_paid_again(fake_adapter, fake_signer):
    transport = payment_required_then(httpx.Response(402, json=make_402_body(error="invalid_signature")))

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(SettlementError) as exc_info:
            await client.get(MOCK_RESOURCE_URL)

    assert exc_info.value.status == 402
    assert exc_info.value.body["error"] == "invalid_signature"
    assert len(transport.requests) == 2
    assert len(fake_signer.signed_messages) == 1


@pytest.mark.asyncio
async def test_non_json_retry_body_is_wrapped(fake_adapter):
    transport = payment_required_then(httpx.Response(502, text="Bad Gateway"))

    async with make_client(fake_adapter, transport) as client:
        with pytest.raises(SettlementError) as exc_info:
            await client.get(MOCK_RESOURCE_URL)

    assert exc_info.value.body == {"error": "Bad Gateway"}


def test_negative_max_payment_is_rejected(fake_adapter):
    with pytest.raises(ConfigurationError):
        Http402Client(fake_adapter, max_payment=-1)


def test_max_payment_property(fake_adapter):
    assert Http402Client(fake_adapter, max_payment=42).max_payment == 42
