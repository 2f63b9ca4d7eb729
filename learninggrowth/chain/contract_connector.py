"""Contract connection resolution and execution.

This module turns a loose set of :class:`ConnectionOptions` into a
:class:`ConnectedContract` and runs read or write calls against it.

Provider resolution, in order:

1. an explicit ``provider``;
2. a fresh provider for ``rpc_url`` (and ``chain_id``);
3. the shared provider built from the environment.

Signer resolution for writes, in order:

1. an explicit ``signer`` (connected to the shared provider if it has none);
2. a wallet for ``private_key`` (or the environment key) bound to the
   provider above, when ``rpc_url`` or ``provider`` was given;
3. otherwise ``create_wallet(private_key)``, which yields the shared wallet
   when no key is passed.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from web3 import Web3
from web3.exceptions import MismatchedABI

from learninggrowth.core.monitoring import log_contract_call

from .abi_loader import Abi
from .errors import (
    ChainClientError,
    ConfigurationError,
    ContractMethodNotFoundError,
    InvalidAddressError,
    SignerUnavailableError,
)
from .provider_factory import ChainProvider, attach_signer, create_provider, get_shared_provider
from .wallet_factory import Wallet, create_wallet, get_shared_wallet

_LOGGER = logging.getLogger(__name__)


@dataclass
class ConnectionOptions:
    """
    Per-call connection overrides.

    Every field is optional; unset fields fall back to the environment and
    the shared singletons.
    """

    address: Optional[str] = None
    abi: Optional[Abi] = None
    provider: Optional[ChainProvider] = None
    signer: Optional[Wallet] = None
    rpc_url: Optional[str] = None
    chain_id: Optional[int] = None
    private_key: Optional[str] = None


@dataclass(frozen=True)
class ConnectedContract:
    """A web3 contract bound to the provider (and signer) that will run its calls."""

    contract: Any
    provider: ChainProvider
    signer: Optional[Wallet] = None

    @property
    def address(self) -> str:
        return self.contract.address


@dataclass(frozen=True)
class ContractExecutionResult:
    result: Any
    tx_hash: Optional[str] = None


def validate_contract_address(address: str) -> None:
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidAddressError(address, field="address")


def _get_safe_wallet_address() -> Optional[str]:
    try:
        return get_shared_wallet().address
    except ChainClientError:
        return None


def _validate_contract_options(options: ConnectionOptions, require_signer: bool = False) -> None:
    if not options.address:
        raise ConfigurationError("The contract address is required.")
    validate_contract_address(options.address)

    if not options.abi:
        raise ConfigurationError("The contract ABI is required to create the contract instance.")

    if require_signer:
        has_signer = bool(options.signer or options.private_key or _get_safe_wallet_address())
        if not has_signer:
            raise SignerUnavailableError(
                "No signer available. Set BLOCKCHAIN_PRIVATE_KEY, pass a custom signer or a privateKey."
            )


def _resolve_provider(options: ConnectionOptions) -> ChainProvider:
    if options.provider is not None:
        return options.provider
    if options.rpc_url:
        return create_provider(rpc_url=options.rpc_url, chain_id=options.chain_id)
    return get_shared_provider()


def _build_contract(provider: ChainProvider, options: ConnectionOptions) -> Any:
    return provider.web3.eth.contract(address=Web3.to_checksum_address(options.address), abi=options.abi)


def connect_read_only_contract(options: ConnectionOptions) -> ConnectedContract:
    """
    Bind a contract for read calls.

    Raises:
        ConfigurationError: If the address or ABI is missing.
        InvalidAddressError: If the address is malformed.
    """
    _validate_contract_options(options)

    provider = _resolve_provider(options)
    return ConnectedContract(contract=_build_contract(provider, options), provider=provider)


def connect_signer_contract(options: ConnectionOptions) -> ConnectedContract:
    """
    Bind a contract for transactions.

    Raises:
        ConfigurationError: If the address or ABI is missing.
        InvalidAddressError: If the address is malformed.
        SignerUnavailableError: If no signer source can be resolved.
    """
    _validate_contract_options(options, require_signer=True)

    if options.signer is not None:
        signer = options.signer if options.signer.provider is not None else attach_signer(options.signer)
        return ConnectedContract(
            contract=_build_contract(signer.provider, options),
            provider=signer.provider,
            signer=signer,
        )

    provider = _resolve_provider(options)
    if options.rpc_url or options.provider is not None:
        signer = create_wallet(private_key=options.private_key, use_shared_provider=False, provider=provider)
    else:
        signer = create_wallet(private_key=options.private_key)

    return ConnectedContract(contract=_build_contract(provider, options), provider=provider, signer=signer)


def _get_function(contract: Any, method: str) -> Any:
    try:
        fn = getattr(contract.functions, method)
    except (AttributeError, MismatchedABI) as exc:
        raise ContractMethodNotFoundError(method) from exc
    if not callable(fn):
        raise ContractMethodNotFoundError(method)
    return fn


def receipt_to_dict(receipt: Any) -> Any:
    """Convert a web3 receipt (``AttributeDict`` with ``HexBytes``) into plain JSON data."""
    return json.loads(Web3.to_json(receipt))


async def execute_read(connected: ConnectedContract, method: str, params: Sequence[Any] = ()) -> ContractExecutionResult:
    """
    Call a view function.

    Raises:
        ContractMethodNotFoundError: If the ABI has no function named ``method``.
    """
    fn = _get_function(connected.contract, method)

    started = time.perf_counter()
    result = await fn(*params).call()
    duration_ms = (time.perf_counter() - started) * 1000

    _LOGGER.debug("Read %s on %s took %.2fms", method, connected.address, duration_ms)
    log_contract_call(contract=connected.address, method=method, kind="read", duration_ms=duration_ms)
    return ContractExecutionResult(result=result)


async def execute_write(
    connected: ConnectedContract, method: str, params: Sequence[Any] = ()
) -> ContractExecutionResult:
    """
    Send a transaction and wait for its receipt.

    Returns:
        The JSON-ready receipt and the transaction hash.

    Raises:
        ContractMethodNotFoundError: If the ABI has no function named ``method``.
        SignerUnavailableError: If the contract was connected without a signer.
    """
    fn = _get_function(connected.contract, method)
    if connected.signer is None:
        raise SignerUnavailableError(f"The function {method} requires a signer-connected contract.")

    started = time.perf_counter()
    sent = await connected.signer.send_transaction(fn(*params))
    duration_ms = (time.perf_counter() - started) * 1000

    _LOGGER.info("Write %s on %s mined in tx %s", method, connected.address, sent.tx_hash)
    log_contract_call(contract=connected.address, method=method, kind="write", duration_ms=duration_ms)
    return ContractExecutionResult(result=receipt_to_dict(sent.receipt), tx_hash=sent.tx_hash)
