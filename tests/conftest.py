import pytest

from x402_screening.adapters.evm import EVMPaymentAdapter, EthAccountSigner

from x402_mocks import MOCK_PRIVATE_KEY, FakeSigner


@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def fake_adapter(fake_signer):
    return EVMPaymentAdapter(fake_signer)


@pytest.fixture
def real_signer():
    return EthAccountSigner(MOCK_PRIVATE_KEY)
