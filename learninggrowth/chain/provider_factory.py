"""Read-only blockchain connections.

A :class:`ChainProvider` wraps an ``AsyncWeb3`` client bound to one JSON-RPC
endpoint. Most requests share a single process-wide provider built from the
environment; callers that pass their own RPC URL get a dedicated one, kept
per ``(rpc_url, chain_id)`` so repeated requests reuse its HTTP session.
:func:`close_providers` releases every session at shutdown.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import aiohttp
from web3 import AsyncWeb3

from learninggrowth.core.config import (
    BlockchainEnvironmentConfig,
    load_blockchain_environment,
    settings,
)

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .wallet_factory import Wallet

_LOGGER = logging.getLogger(__name__)

_shared_provider: Optional["ChainProvider"] = None
_cached_config: Optional[BlockchainEnvironmentConfig] = None
_dedicated_providers: Dict[Tuple[str, Optional[int]], "ChainProvider"] = {}


class ChainProvider:
    """
    Read-only connection to a JSON-RPC endpoint.

    Attributes:
        rpc_url: Endpoint URL.
        web3: The underlying ``AsyncWeb3`` client.
    """

    def __init__(self, rpc_url: str, chain_id: Optional[int] = None, request_timeout: Optional[float] = None) -> None:
        timeout = request_timeout if request_timeout is not None else settings.request_timeout
        self.rpc_url = rpc_url
        self._chain_id = chain_id
        self.web3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)})
        )

    @property
    def configured_chain_id(self) -> Optional[int]:
        return self._chain_id

    async def get_chain_id(self) -> int:
        """Return the configured chain id, asking the node the first time if none was given."""
        if self._chain_id is None:
            self._chain_id = await self.web3.eth.chain_id
        return self._chain_id

    async def disconnect(self) -> None:
        """Close the HTTP session opened by the underlying web3 provider, if any."""
        await self.web3.provider.disconnect()

    def __repr__(self) -> str:
        return f"ChainProvider(rpc_url={self.rpc_url!r}, chain_id={self._chain_id!r})"


def _get_environment_config() -> BlockchainEnvironmentConfig:
    global _cached_config

    if _cached_config is None:
        _cached_config = load_blockchain_environment()
    return _cached_config


def create_provider(rpc_url: Optional[str] = None, chain_id: Optional[int] = None) -> ChainProvider:
    """
    Build a provider for ``rpc_url``, falling back to the environment.

    When either argument is missing the environment configuration is
    consulted. A missing environment RPC URL is only an error when the caller
    did not supply one. A provider built purely from the environment replaces
    the shared provider; any other provider is reused for the same endpoint and
    chain id.

    Raises:
        ConfigurationError: If no RPC URL can be determined.
    """
    global _shared_provider

    config: Optional[BlockchainEnvironmentConfig] = None
    if not rpc_url or chain_id is None:
        try:
            config = _get_environment_config()
        except ConfigurationError:
            if not rpc_url:
                raise

    effective_rpc_url = rpc_url or (config.rpc_url if config else None)
    if not effective_rpc_url:
        raise ConfigurationError("Could not determine the RPC provider URL.")

    effective_chain_id = chain_id if chain_id is not None else (config.chain_id if config else None)

    if not rpc_url and chain_id is None:
        _shared_provider = ChainProvider(effective_rpc_url, effective_chain_id)
        _LOGGER.info("Shared blockchain provider created for %s", effective_rpc_url)
        return _shared_provider

    key = (effective_rpc_url, effective_chain_id)
    provider = _dedicated_providers.get(key)
    if provider is None:
        provider = ChainProvider(effective_rpc_url, effective_chain_id)
        _dedicated_providers[key] = provider
        _LOGGER.debug("Dedicated blockchain provider created for %s (chain id %s)", *key)
    return provider


def get_shared_provider() -> ChainProvider:
    """Return the process-wide provider, creating it from the environment on first use."""
    global _shared_provider

    if _shared_provider is None:
        _shared_provider = create_provider()
    return _shared_provider


def reset_provider_factory() -> None:
    """
    Forget the shared provider, the dedicated providers and the cached environment configuration.

    Open HTTP sessions are not closed; use :func:`close_providers` for that.
    """
    global _shared_provider, _cached_config

    _shared_provider = None
    _cached_config = None
    _dedicated_providers.clear()


async def close_providers() -> None:
    """Disconnect every provider created by this module, then reset the factory."""
    providers: List[ChainProvider] = list(_dedicated_providers.values())
    if _shared_provider is not None:
        providers.append(_shared_provider)

    for provider in providers:
        try:
            await provider.disconnect()
        except Exception:
            _LOGGER.warning("Failed to disconnect provider for %s", provider.rpc_url, exc_info=True)

    reset_provider_factory()
    _LOGGER.info("Closed %d blockchain provider(s)", len(providers))


def attach_signer(wallet: "Wallet") -> "Wallet":
    """Return ``wallet`` connected to the shared provider."""
    return wallet.connect(get_shared_provider())
