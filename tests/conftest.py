import pytest

from enscribe.networks import NetworkContractSet, evm_coin_type
from tests.fakes import (
    BASE_CHAIN_ID,
    L2_REVERSE_REGISTRAR,
    REGISTRY,
    RESOLVER,
    REVERSE_REGISTRAR,
    WRAPPER,
    FakeChainClient,
)


@pytest.fixture
def contracts():
    return NetworkContractSet(
        registry=REGISTRY,
        resolver=RESOLVER,
        wrapper=WRAPPER,
        reverse_registrar=REVERSE_REGISTRAR,
        coin_type=60,
    )


@pytest.fixture
def secondary_contracts():
    return NetworkContractSet(
        l2_reverse_registrar=L2_REVERSE_REGISTRAR,
        coin_type=evm_coin_type(BASE_CHAIN_ID),
    )


@pytest.fixture
def client():
    return FakeChainClient()


@pytest.fixture
def secondary_client():
    return FakeChainClient(chain_id=BASE_CHAIN_ID)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep ENSCRIBE_* settings from the developer's shell out of the tests."""
    for name in (
        "ENSCRIBE_LOG_LEVEL",
        "ENSCRIBE_LOG_STDOUT",
        "ENSCRIBE_LOG_FORMAT",
        "ENSCRIBE_OP_TYPE",
        "ENSCRIBE_ENABLE_METRICS",
        "ENSCRIBE_METRICS_URL",
        "ENSCRIBE_EXPLORER_URL",
        "ENSCRIBE_RPC_URL",
        "ENSCRIBE_PRIVATE_KEY",
        "ENSCRIBE_NETWORK",
        "ENSCRIBE_L2_RPC_URL",
        "ENSCRIBE_L2_PRIVATE_KEY",
        "ENSCRIBE_L2_NETWORK",
        "ENSCRIBE_RECEIPT_TIMEOUT",
        "ENSCRIBE_CONTRACTS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENSCRIBE_LOG_DIR", str(tmp_path / "logs"))
    yield
