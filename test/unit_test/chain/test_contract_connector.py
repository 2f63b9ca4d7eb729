"""Unit tests for contract connection resolution and execution."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from web3.datastructures import AttributeDict

from learninggrowth.chain.abi_loader import load_abi
from learninggrowth.chain.contract_connector import (
    ConnectedContract,
    ConnectionOptions,
    connect_read_only_contract,
    connect_signer_contract,
    execute_read,
    execute_write,
    receipt_to_dict,
)
from learninggrowth.chain.errors import (
    ConfigurationError,
    ContractMethodNotFoundError,
    InvalidAddressError,
    SignerUnavailableError,
)
from learninggrowth.chain.provider_factory import ChainProvider, get_shared_provider
from learninggrowth.chain.wallet_factory import SentTransaction, Wallet, get_shared_wallet
from learninggrowth.core.config import BUNDLED_ABI_DIR

TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
OTHER_PRIVATE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
TEST_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ACCOUNT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


@pytest.fixture
def abi():
    return load_abi(BUNDLED_ABI_DIR / "ClassScheduler.json")


@pytest.fixture
def options(abi) -> ConnectionOptions:
    return ConnectionOptions(address=CONTRACT_ADDRESS, abi=abi)


class TestReadOnlyConnection:
    def test_missing_address_raises(self, abi):
        with pytest.raises(ConfigurationError, match="address is required"):
            connect_read_only_contract(ConnectionOptions(abi=abi))

    def test_missing_abi_raises(self):
        with pytest.raises(ConfigurationError, match="ABI is required"):
            connect_read_only_contract(ConnectionOptions(address=CONTRACT_ADDRESS))

    def test_invalid_address_raises(self, abi):
        with pytest.raises(InvalidAddressError):
            connect_read_only_contract(ConnectionOptions(address="0xnot-an-address", abi=abi))

    def test_explicit_provider_wins(self, options):
        provider = ChainProvider("http://localhost:9545", chain_id=5)
        options.provider = provider
        options.rpc_url = "http://localhost:1111"

        connected = connect_read_only_contract(options)

        assert connected.provider is provider
        assert connected.signer is None

    def test_rpc_url_builds_dedicated_provider(self, options, chain_env):
        options.rpc_url = "http://localhost:9545"
        options.chain_id = 5

        connected = connect_read_only_contract(options)

        assert connected.provider.rpc_url == "http://localhost:9545"
        assert connected.provider.configured_chain_id == 5
        assert connected.provider is not get_shared_provider()

    def test_falls_back_to_shared_provider(self, options, chain_env):
        connected = connect_read_only_contract(options)

        assert connected.provider is get_shared_provider()
        assert connected.address == CONTRACT_ADDRESS

    def test_lowercase_address_is_checksummed(self, abi, chain_env):
        connected = connect_read_only_contract(ConnectionOptions(address=CONTRACT_ADDRESS.lower(), abi=abi))

        assert connected.address == CONTRACT_ADDRESS

    def test_without_any_rpc_url_raises(self, options):
        with pytest.raises(ConfigurationError):
            connect_read_only_contract(options)


class TestSignerConnection:
    def test_requires_some_signer_source(self, options, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BLOCKCHAIN_RPC_URL", "http://127.0.0.1:8545")

        with pytest.raises(SignerUnavailableError, match="No signer available"):
            connect_signer_contract(options)

    def test_explicit_connected_signer_is_used(self, options):
        provider = ChainProvider("http://localhost:9545", chain_id=5)
        signer = Wallet.from_key(OTHER_PRIVATE_KEY, provider)
        options.signer = signer

        connected = connect_signer_contract(options)

        assert connected.signer is signer
        assert connected.provider is provider

    def test_unconnected_signer_is_attached_to_shared_provider(self, options, chain_env):
        options.signer = Wallet.from_key(OTHER_PRIVATE_KEY)

        connected = connect_signer_contract(options)

        assert connected.signer.address == OTHER_ACCOUNT
        assert connected.signer.provider is get_shared_provider()
        assert connected.provider is get_shared_provider()

    def test_rpc_url_with_private_key_builds_dedicated_wallet(self, options):
        options.rpc_url = "http://localhost:9545"
        options.chain_id = 5
        options.private_key = OTHER_PRIVATE_KEY

        connected = connect_signer_contract(options)

        assert connected.signer.address == OTHER_ACCOUNT
        assert connected.signer.provider is connected.provider
        assert connected.provider.rpc_url == "http://localhost:9545"

    def test_rpc_url_without_private_key_uses_environment_key(self, options, chain_env):
        options.rpc_url = "http://localhost:9545"

        connected = connect_signer_contract(options)

        assert connected.signer.address == TEST_ACCOUNT
        assert connected.signer.provider is connected.provider
        assert connected.signer is not get_shared_wallet()

    def test_private_key_alone_uses_shared_provider(self, options, chain_env):
        options.private_key = OTHER_PRIVATE_KEY

        connected = connect_signer_contract(options)

        assert connected.signer.address == OTHER_ACCOUNT
        assert connected.provider is get_shared_provider()

    def test_defaults_to_shared_wallet(self, options, chain_env):
        connected = connect_signer_contract(options)

        assert connected.signer is get_shared_wallet()
        assert connected.provider is get_shared_provider()


class TestExecution:
    @pytest.fixture
    def connected(self, options, chain_env) -> ConnectedContract:
        return connect_read_only_contract(options)

    @pytest.mark.asyncio
    async def test_execute_read_calls_function(self, connected):
        contract = MagicMock()
        contract.address = CONTRACT_ADDRESS
        contract.functions.getClassCount.return_value.call = AsyncMock(return_value=3)
        mocked = ConnectedContract(contract=contract, provider=connected.provider)

        with patch("learninggrowth.chain.contract_connector.log_contract_call") as mock_log:
            execution = await execute_read(mocked, "getClassCount")

        assert execution.result == 3
        assert execution.tx_hash is None
        contract.functions.getClassCount.assert_called_once_with()
        assert mock_log.call_args.kwargs["kind"] == "read"
        assert mock_log.call_args.kwargs["method"] == "getClassCount"

    @pytest.mark.asyncio
    async def test_execute_read_passes_params(self, connected):
        contract = MagicMock()
        contract.functions.isEnrolled.return_value.call = AsyncMock(return_value=True)
        mocked = ConnectedContract(contract=contract, provider=connected.provider)

        execution = await execute_read(mocked, "isEnrolled", [1, TEST_ACCOUNT])

        assert execution.result is True
        contract.functions.isEnrolled.assert_called_once_with(1, TEST_ACCOUNT)

    @pytest.mark.asyncio
    async def test_unknown_function_raises(self, connected):
        with pytest.raises(ContractMethodNotFoundError, match="doesNotExist"):
            await execute_read(connected, "doesNotExist")

    @pytest.mark.asyncio
    async def test_execute_write_requires_signer(self, connected):
        with pytest.raises(SignerUnavailableError):
            await execute_write(connected, "cancelClass", [1])

    @pytest.mark.asyncio
    async def test_execute_write_returns_receipt_and_hash(self, connected):
        contract = MagicMock()
        contract.address = CONTRACT_ADDRESS
        signer = MagicMock()
        receipt = AttributeDict({"status": 1, "blockNumber": 9, "transactionHash": bytes.fromhex("cd" * 32)})
        signer.send_transaction = AsyncMock(return_value=SentTransaction(tx_hash="0x" + "cd" * 32, receipt=receipt))
        mocked = ConnectedContract(contract=contract, provider=connected.provider, signer=signer)

        with patch("learninggrowth.chain.contract_connector.log_contract_call") as mock_log:
            execution = await execute_write(mocked, "cancelClass", [4])

        contract.functions.cancelClass.assert_called_once_with(4)
        signer.send_transaction.assert_awaited_once_with(contract.functions.cancelClass.return_value)
        assert execution.tx_hash == "0x" + "cd" * 32
        assert execution.result == {"status": 1, "blockNumber": 9, "transactionHash": "0x" + "cd" * 32}
        assert mock_log.call_args.kwargs["kind"] == "write"


def test_receipt_to_dict_converts_bytes_to_hex():
    receipt = AttributeDict(
        {
            "blockHash": bytes.fromhex("01" * 32),
            "logs": [AttributeDict({"data": b"\x00\x01", "topics": [bytes.fromhex("02" * 32)]})],
            "status": 1,
        }
    )

    converted = receipt_to_dict(receipt)

    assert converted["blockHash"] == "0x" + "01" * 32
    assert converted["logs"][0]["data"] == "0x0001"
    assert converted["logs"][0]["topics"] == ["0x" + "02" * 32]
    assert converted["status"] == 1
