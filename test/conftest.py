from __future__ import annotations

import pytest
from web3 import AsyncHTTPProvider

from learninggrowth.chain import contract_registry
from learninggrowth.chain.provider_factory import reset_provider_factory
from learninggrowth.chain.wallet_factory import reset_wallet_factory
from learninggrowth.services import class_scheduler, learning_points_token

# Hardhat/Anvil development account #0 and #1; never funded outside local nodes.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ACCOUNT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
SCHEDULER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TOKEN_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"

CHAIN_ENV_VARS = (
    "BLOCKCHAIN_RPC_URL",
    "RPC_URL",
    "BLOCKCHAIN_PRIVATE_KEY",
    "PRIVATE_KEY",
    "BLOCKCHAIN_CHAIN_ID",
    "CHAIN_ID",
    "CLASS_SCHEDULER_ADDRESS",
    "LEARNING_POINTS_TOKEN_ADDRESS",
    "CLASS_SCHEDULER_ABI_PATH",
    "LEARNING_POINTS_TOKEN_ABI_PATH",
)


@pytest.fixture(autouse=True)
def _global_offline_rpc_guard(monkeypatch: pytest.MonkeyPatch):
    """Refuse every JSON-RPC request and start each test from a clean chain state."""

    async def blocked_request(self, method, params):
        raise RuntimeError(f"JSON-RPC blocked by global offline guard: {method} -> {self.endpoint_uri}")

    monkeypatch.setattr(AsyncHTTPProvider, "make_request", blocked_request, raising=True)

    for name in CHAIN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    reset_provider_factory()
    reset_wallet_factory()
    contract_registry.clear_registry()
    class_scheduler.get_class_scheduler_abi.cache_clear()
    learning_points_token.get_learning_points_abi.cache_clear()

    yield

    reset_provider_factory()
    reset_wallet_factory()
    contract_registry.clear_registry()


@pytest.fixture
def chain_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """A complete local-node environment: RPC endpoint, signing key, chain id and both contracts."""
    values = {
        "BLOCKCHAIN_RPC_URL": "http://127.0.0.1:8545",
        "BLOCKCHAIN_PRIVATE_KEY": TEST_PRIVATE_KEY,
        "BLOCKCHAIN_CHAIN_ID": "31337",
        "CLASS_SCHEDULER_ADDRESS": SCHEDULER_ADDRESS,
        "LEARNING_POINTS_TOKEN_ADDRESS": TOKEN_ADDRESS,
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values
