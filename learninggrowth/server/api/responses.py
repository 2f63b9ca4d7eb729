"""Helpers shared by the routers: path parameter checks and envelope builders."""

from typing import Optional, TypeVar

from learninggrowth.chain.contract_connector import ConnectionOptions, ContractExecutionResult
from learninggrowth.server.exception_handlers import HttpError
from learninggrowth.server.schemas import ApiResponse, ContractResultData, OptionsRequest

T = TypeVar("T")


def ensure_non_empty_string(value: Optional[str], field: str) -> str:
    """Return ``value`` trimmed, or raise a 400 when it is blank."""
    if not isinstance(value, str) or not value.strip():
        raise HttpError(f"The field {field} is required.", 400)
    return value.strip()


def success(data: T) -> ApiResponse[T]:
    return ApiResponse(data=data)


def contract_result(execution: ContractExecutionResult) -> ApiResponse[ContractResultData]:
    return ApiResponse(data=ContractResultData(result=execution.result, tx_hash=execution.tx_hash))


def options_of(payload: Optional[OptionsRequest]) -> Optional[ConnectionOptions]:
    return payload.connection_options() if payload is not None else None
