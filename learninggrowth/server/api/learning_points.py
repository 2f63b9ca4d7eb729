"""
Learning Points Token API Endpoints.

This module exposes the LearningPointsToken contract: token metadata, supply,
balances and allowances, the ERC20 transfer family, and the reward-specific
mint, burn, award and revoke operations.

Amounts are accepted as JSON numbers or numeric strings and returned as
decimal strings.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from learninggrowth.server.schemas import (
    AccountAmountRequest,
    AllowanceData,
    ApiResponse,
    ApproveRequest,
    BalanceData,
    ContractResultData,
    StudentAmountRequest,
    TokenMetadataData,
    TotalSupplyData,
    TransferFromRequest,
    TransferRequest,
)
from learninggrowth.services import learning_points_token as token_service

from .responses import contract_result, ensure_non_empty_string, success

router = APIRouter()

Address = Annotated[str, Path(description="Wallet or contract address.")]


# ============================================================================
# Reads
# ============================================================================


@router.get(
    "/metadata",
    response_model=ApiResponse[TokenMetadataData],
    summary="Get Token Metadata",
    description="Name, symbol and decimals of the token.",
)
async def get_token_metadata():
    metadata = await token_service.get_token_metadata()
    return success(TokenMetadataData(name=metadata.name, symbol=metadata.symbol, decimals=metadata.decimals))


@router.get(
    "/supply",
    response_model=ApiResponse[TotalSupplyData],
    summary="Get Total Supply",
    description="Total number of points in circulation.",
)
async def get_total_supply():
    total_supply = await token_service.get_total_supply()
    return success(TotalSupplyData(total_supply=total_supply))


@router.get(
    "/balances/{account}",
    response_model=ApiResponse[BalanceData],
    summary="Get Balance",
    description="Points held by an account.",
)
async def get_token_balance(account: Address):
    account = ensure_non_empty_string(account, "account")
    balance = await token_service.get_token_balance(account)
    return success(BalanceData(balance=balance, account=account))


@router.get(
    "/allowances/{owner}/{spender}",
    response_model=ApiResponse[AllowanceData],
    summary="Get Allowance",
    description="Points a spender may still move on behalf of an owner.",
)
async def get_token_allowance(owner: Address, spender: Address):
    owner = ensure_non_empty_string(owner, "owner")
    spender = ensure_non_empty_string(spender, "spender")
    allowance = await token_service.get_token_allowance(owner, spender)
    return success(AllowanceData(owner=owner, spender=spender, allowance=allowance))


# ============================================================================
# Writes
# ============================================================================


@router.post(
    "/approve",
    response_model=ApiResponse[ContractResultData],
    summary="Approve Spender",
    description="Allow a spender to move up to `amount` points from the signer's balance.",
)
async def approve_spender(payload: ApproveRequest):
    execution = await token_service.approve_spender(payload.spender, payload.amount, payload.connection_options())
    return contract_result(execution)


@router.post(
    "/transfer",
    response_model=ApiResponse[ContractResultData],
    summary="Transfer Points",
    description="Transfer points from the signer to another account.",
)
async def transfer(payload: TransferRequest):
    execution = await token_service.transfer(payload.to, payload.amount, payload.connection_options())
    return contract_result(execution)


@router.post(
    "/transfer-from",
    response_model=ApiResponse[ContractResultData],
    summary="Transfer Points From",
    description="Transfer points between two accounts using the signer's allowance.",
)
async def transfer_from(payload: TransferFromRequest):
    execution = await token_service.transfer_from(
        payload.sender, payload.to, payload.amount, payload.connection_options()
    )
    return contract_result(execution)


@router.post(
    "/mint",
    response_model=ApiResponse[ContractResultData],
    summary="Mint Points",
    description="Create new points for an account.",
)
async def mint(payload: AccountAmountRequest):
    execution = await token_service.mint(payload.account, payload.amount, payload.connection_options())
    return contract_result(execution)


@router.post(
    "/burn",
    response_model=ApiResponse[ContractResultData],
    summary="Burn Points",
    description="Destroy points held by an account.",
)
async def burn(payload: AccountAmountRequest):
    execution = await token_service.burn(payload.account, payload.amount, payload.connection_options())
    return contract_result(execution)


@router.post(
    "/award",
    response_model=ApiResponse[ContractResultData],
    summary="Award Points",
    description="Award points to a student.",
)
async def award_points(payload: StudentAmountRequest):
    execution = await token_service.award_points(payload.student, payload.amount, payload.connection_options())
    return contract_result(execution)


@router.post(
    "/revoke",
    response_model=ApiResponse[ContractResultData],
    summary="Revoke Points",
    description="Take previously awarded points back from a student.",
)
async def revoke_points(payload: StudentAmountRequest):
    execution = await token_service.revoke_points(payload.student, payload.amount, payload.connection_options())
    return contract_result(execution)
