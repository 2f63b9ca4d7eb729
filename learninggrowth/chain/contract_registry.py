"""Named contract registry.

The registry maps a logical contract name (e.g. ``"ClassScheduler"``) to the
address, ABI and optional endpoint needed to connect to it. The server fills
it at startup from the configured deployments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .abi_loader import Abi
from .contract_connector import (
    ConnectedContract,
    ConnectionOptions,
    connect_read_only_contract,
    connect_signer_contract,
)
from .errors import ContractAlreadyRegisteredError, ContractNotRegisteredError


@dataclass(frozen=True)
class RegisteredContractConfig:
    name: str
    address: str
    abi: Abi
    chain_id: Optional[int] = None
    rpc_url: Optional[str] = None


class ContractRegistry:
    """
    In-memory mapping of contract names to their deployment configuration.

    Notes:
        - ``register`` refuses to overwrite an existing name; use ``update``.
        - ``get`` raises ``ContractNotRegisteredError`` for unknown names.
    """

    def __init__(self) -> None:
        self._contracts: Dict[str, RegisteredContractConfig] = {}

    def register(self, config: RegisteredContractConfig) -> None:
        if config.name in self._contracts:
            raise ContractAlreadyRegisteredError(config.name)
        self._contracts[config.name] = config

    def update(self, config: RegisteredContractConfig) -> None:
        self._contracts[config.name] = config

    def get(self, name: str) -> RegisteredContractConfig:
        try:
            return self._contracts[name]
        except KeyError:
            raise ContractNotRegisteredError(name) from None

    def has(self, name: str) -> bool:
        return name in self._contracts

    def list(self) -> List[RegisteredContractConfig]:
        return list(self._contracts.values())

    def clear(self) -> None:
        self._contracts.clear()

    def _options_for(self, name: str, overrides: Optional[ConnectionOptions]) -> ConnectionOptions:
        config = self.get(name)
        overrides = overrides or ConnectionOptions()
        return ConnectionOptions(
            address=config.address,
            abi=config.abi,
            rpc_url=overrides.rpc_url or config.rpc_url,
            chain_id=overrides.chain_id if overrides.chain_id is not None else config.chain_id,
            provider=overrides.provider,
            signer=overrides.signer,
            private_key=overrides.private_key,
        )

    def connect(self, name: str, options: Optional[ConnectionOptions] = None) -> ConnectedContract:
        """Connect the registered contract read-only; ``options`` override its endpoint."""
        return connect_read_only_contract(self._options_for(name, options))

    def connect_with_signer(self, name: str, options: Optional[ConnectionOptions] = None) -> ConnectedContract:
        """Connect the registered contract for transactions; ``options`` override its endpoint."""
        return connect_signer_contract(self._options_for(name, options))


_registry = ContractRegistry()


def get_registry() -> ContractRegistry:
    return _registry


def register_contract(config: RegisteredContractConfig) -> None:
    _registry.register(config)


def update_contract(config: RegisteredContractConfig) -> None:
    _registry.update(config)


def get_contract_config(name: str) -> RegisteredContractConfig:
    return _registry.get(name)


def list_contracts() -> List[RegisteredContractConfig]:
    return _registry.list()


def connect_registered_contract(name: str, options: Optional[ConnectionOptions] = None) -> ConnectedContract:
    return _registry.connect(name, options)


def connect_registered_contract_with_signer(
    name: str, options: Optional[ConnectionOptions] = None
) -> ConnectedContract:
    return _registry.connect_with_signer(name, options)


def clear_registry() -> None:
    _registry.clear()
