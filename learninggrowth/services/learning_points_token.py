"""LearningPointsToken contract service.

Reads and writes against the ERC20-like learning points token. Amounts are
coerced with :func:`to_uint`, accounts with :func:`to_address`. Connection
details default to ``LEARNING_POINTS_TOKEN_ADDRESS`` and the bundled ABI.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional

from learninggrowth.chain.abi_loader import Abi, load_abi
from learninggrowth.chain.coercion import NumericValue, to_address, to_int, to_uint
from learninggrowth.chain.contract_connector import (
    ConnectedContract,
    ConnectionOptions,
    ContractExecutionResult,
    connect_read_only_contract,
    connect_signer_contract,
    execute_read,
    execute_write,
)
from learninggrowth.chain.errors import ConfigurationError
from learninggrowth.core.config import load_contract_addresses, settings

CONTRACT_NAME = "LearningPointsToken"


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int


@lru_cache(maxsize=1)
def get_learning_points_abi() -> Abi:
    """Load the configured LearningPointsToken ABI once per process."""
    return load_abi(settings.learning_points_token_abi_path)


def _resolve_options(options: Optional[ConnectionOptions]) -> ConnectionOptions:
    options = options or ConnectionOptions()
    address = options.address or load_contract_addresses().learning_points_token
    if not address:
        raise ConfigurationError(
            "No LearningPointsToken contract address was provided. "
            "Set LEARNING_POINTS_TOKEN_ADDRESS or pass an address explicitly."
        )
    return replace(options, address=address, abi=options.abi or get_learning_points_abi())


def get_learning_points_token_contract(options: Optional[ConnectionOptions] = None) -> ConnectedContract:
    return connect_read_only_contract(_resolve_options(options))


def get_learning_points_token_contract_with_signer(options: Optional[ConnectionOptions] = None) -> ConnectedContract:
    return connect_signer_contract(_resolve_options(options))


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_token_metadata(options: Optional[ConnectionOptions] = None) -> TokenMetadata:
    """Fetch name, symbol and decimals concurrently."""
    contract = get_learning_points_token_contract(options)
    name, symbol, decimals = await asyncio.gather(
        execute_read(contract, "name"),
        execute_read(contract, "symbol"),
        execute_read(contract, "decimals"),
    )
    return TokenMetadata(
        name=str(name.result),
        symbol=str(symbol.result),
        decimals=to_int(decimals.result, "decimals"),
    )


async def get_total_supply(options: Optional[ConnectionOptions] = None) -> int:
    contract = get_learning_points_token_contract(options)
    execution = await execute_read(contract, "totalSupply")
    return to_int(execution.result, "totalSupply")


async def get_token_balance(account: str, options: Optional[ConnectionOptions] = None) -> int:
    args = [to_address(account, "account")]
    contract = get_learning_points_token_contract(options)
    execution = await execute_read(contract, "balanceOf", args)
    return to_int(execution.result, "balance")


async def get_token_allowance(owner: str, spender: str, options: Optional[ConnectionOptions] = None) -> int:
    args = [to_address(owner, "owner"), to_address(spender, "spender")]
    contract = get_learning_points_token_contract(options)
    execution = await execute_read(contract, "allowance", args)
    return to_int(execution.result, "allowance")


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def approve_spender(
    spender: str, amount: NumericValue, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_address(spender, "spender"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "approve", args)


async def transfer(to: str, amount: NumericValue, options: Optional[ConnectionOptions] = None) -> ContractExecutionResult:
    args = [to_address(to, "to"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "transfer", args)


async def transfer_from(
    sender: str, to: str, amount: NumericValue, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_address(sender, "from"), to_address(to, "to"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "transferFrom", args)


async def mint(account: str, amount: NumericValue, options: Optional[ConnectionOptions] = None) -> ContractExecutionResult:
    args = [to_address(account, "account"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "mint", args)


async def burn(account: str, amount: NumericValue, options: Optional[ConnectionOptions] = None) -> ContractExecutionResult:
    args = [to_address(account, "account"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "burn", args)


async def award_points(
    student: str, amount: NumericValue, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_address(student, "student"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "awardPoints", args)


async def revoke_points(
    student: str, amount: NumericValue, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_address(student, "student"), to_uint(amount, "amount")]
    contract = get_learning_points_token_contract_with_signer(options)
    return await execute_write(contract, "revokePoints", args)
