"""Unit tests for the provider factory."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from learninggrowth.chain import provider_factory
from learninggrowth.chain.errors import ConfigurationError
from learninggrowth.chain.provider_factory import (
    ChainProvider,
    attach_signer,
    close_providers,
    create_provider,
    get_shared_provider,
    reset_provider_factory,
)


class TestCreateProvider:
    def test_builds_provider_from_environment(self, chain_env):
        provider = create_provider()

        assert provider.rpc_url == chain_env["BLOCKCHAIN_RPC_URL"]
        assert provider.configured_chain_id == 31337

    def test_environment_provider_becomes_shared(self, chain_env):
        provider = create_provider()

        assert get_shared_provider() is provider

    def test_explicit_arguments_do_not_touch_shared_provider(self, chain_env):
        shared = get_shared_provider()
        custom = create_provider(rpc_url="http://localhost:9545", chain_id=5)

        assert custom is not shared
        assert custom.rpc_url == "http://localhost:9545"
        assert custom.configured_chain_id == 5
        assert get_shared_provider() is shared

    def test_explicit_url_borrows_chain_id_from_environment(self, chain_env):
        provider = create_provider(rpc_url="http://localhost:9545")

        assert provider.configured_chain_id == 31337

    def test_explicit_url_works_without_environment(self):
        provider = create_provider(rpc_url="http://localhost:9545")

        assert provider.rpc_url == "http://localhost:9545"
        assert provider.configured_chain_id is None

    def test_missing_rpc_url_raises(self):
        with pytest.raises(ConfigurationError, match="BLOCKCHAIN_RPC_URL"):
            create_provider()

    def test_legacy_variable_names_are_accepted(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("RPC_URL", "http://127.0.0.1:7545")
        monkeypatch.setenv("CHAIN_ID", "1337")

        provider = create_provider()

        assert provider.rpc_url == "http://127.0.0.1:7545"
        assert provider.configured_chain_id == 1337

    def test_environment_is_cached_until_reset(self, chain_env, monkeypatch: pytest.MonkeyPatch):
        create_provider()
        monkeypatch.setenv("BLOCKCHAIN_RPC_URL", "http://127.0.0.1:9999")

        assert create_provider().rpc_url == chain_env["BLOCKCHAIN_RPC_URL"]

        reset_provider_factory()
        assert create_provider().rpc_url == "http://127.0.0.1:9999"


class TestSharedProvider:
    def test_is_created_lazily_once(self, chain_env):
        first = get_shared_provider()
        second = get_shared_provider()

        assert first is second

    def test_reset_forgets_shared_provider(self, chain_env):
        first = get_shared_provider()
        reset_provider_factory()

        assert get_shared_provider() is not first
        assert provider_factory._cached_config is not None

    def test_attach_signer_connects_wallet_to_shared_provider(self, chain_env):
        wallet = MagicMock()
        attach_signer(wallet)

        wallet.connect.assert_called_once_with(get_shared_provider())


class TestChainProvider:
    @pytest.mark.asyncio
    async def test_configured_chain_id_skips_rpc(self):
        provider = ChainProvider("http://localhost:8545", chain_id=10)

        assert await provider.get_chain_id() == 10

    @pytest.mark.asyncio
    async def test_chain_id_is_queried_once(self):
        provider = ChainProvider("http://localhost:8545")
        provider.web3 = MagicMock()
        provider.web3.eth.chain_id = _awaitable(8453)

        assert await provider.get_chain_id() == 8453
        assert provider.configured_chain_id == 8453

    @pytest.mark.asyncio
    async def test_unreachable_node_is_blocked_offline(self):
        provider = ChainProvider("http://203.0.113.1:8545")

        with pytest.raises(RuntimeError, match="offline guard"):
            await provider.get_chain_id()

    def test_repr_includes_endpoint(self):
        provider = ChainProvider("http://localhost:8545", request_timeout=3)

        assert "localhost" in repr(provider)


def _awaitable(value):
    mock = AsyncMock(return_value=value)
    return mock()


class TestDedicatedProviders:
    def test_same_endpoint_reuses_provider(self):
        first = create_provider(rpc_url="http://localhost:9545", chain_id=5)
        second = create_provider(rpc_url="http://localhost:9545", chain_id=5)

        assert first is second

    def test_different_chain_id_gets_own_provider(self):
        first = create_provider(rpc_url="http://localhost:9545", chain_id=5)
        second = create_provider(rpc_url="http://localhost:9545", chain_id=10)

        assert first is not second
        assert second.configured_chain_id == 10

    def test_reset_forgets_dedicated_providers(self):
        first = create_provider(rpc_url="http://localhost:9545", chain_id=5)
        reset_provider_factory()

        assert create_provider(rpc_url="http://localhost:9545", chain_id=5) is not first


@pytest.mark.asyncio
class TestCloseProviders:
    async def test_disconnect_closes_web3_session(self):
        provider = ChainProvider("http://localhost:8545")
        provider.web3.provider.disconnect = AsyncMock()

        await provider.disconnect()

        provider.web3.provider.disconnect.assert_awaited_once()

    async def test_disconnects_shared_and_dedicated_providers(self, chain_env):
        shared = get_shared_provider()
        dedicated = create_provider(rpc_url="http://localhost:9545", chain_id=5)
        shared.disconnect = AsyncMock()
        dedicated.disconnect = AsyncMock()

        await close_providers()

        shared.disconnect.assert_awaited_once()
        dedicated.disconnect.assert_awaited_once()
        assert provider_factory._shared_provider is None
        assert provider_factory._dedicated_providers == {}

    async def test_failed_disconnect_does_not_stop_the_others(self):
        failing = create_provider(rpc_url="http://localhost:9545", chain_id=5)
        healthy = create_provider(rpc_url="http://localhost:9546", chain_id=5)
        failing.disconnect = AsyncMock(side_effect=RuntimeError("already closed"))
        healthy.disconnect = AsyncMock()

        await close_providers()

        healthy.disconnect.assert_awaited_once()
        assert provider_factory._dedicated_providers == {}

    async def test_nothing_to_close(self):
        await close_providers()

        assert provider_factory._shared_provider is None
