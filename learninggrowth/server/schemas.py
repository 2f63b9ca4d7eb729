"""
API Schemas.

This module contains Pydantic models used for API request bodies and response validation.
These schemas define the interface contract between the client and the server.

JSON field names are camelCase (``metadataURI``, ``rewardAmount``); the Python
attributes are snake_case and mapped through aliases. Integer quantities that
may exceed the JSON safe-integer range are serialized as decimal strings.
"""

from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, StringConstraints
from pydantic_core import PydanticCustomError

from learninggrowth.chain.contract_connector import ConnectionOptions

T = TypeVar("T")


def _require_value(value: Any) -> Any:
    if value is None:
        raise PydanticCustomError("required", "Field required")
    return value


def _parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
    raise PydanticCustomError("boolean_value", "Value must be a boolean")


RequiredString = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
"""A present, non-blank string; surrounding whitespace is stripped."""

RequiredValue = Annotated[Any, AfterValidator(_require_value)]
"""Any present, non-null value. Numeric coercion happens in the service layer."""

BooleanFlag = Annotated[bool, BeforeValidator(_parse_boolean)]
"""A JSON boolean or the strings ``"true"``/``"false"`` (case-insensitive)."""

Uint256 = Annotated[int, PlainSerializer(lambda value: str(value), return_type=str)]


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Request Schemas
# ============================================================================


class ConnectionOptionsPayload(ApiModel):
    """
    Per-request connection overrides.

    Any field left out falls back to the server configuration.
    """

    address: Optional[str] = Field(default=None, description="Contract address to call instead of the configured one.")
    abi: Optional[List[Dict[str, Any]]] = Field(default=None, description="ABI to use instead of the bundled one.")
    rpc_url: Optional[str] = Field(default=None, alias="rpcUrl", description="JSON-RPC endpoint to use.")
    chain_id: Optional[int] = Field(default=None, alias="chainId", description="Chain id for signed transactions.")
    private_key: Optional[str] = Field(default=None, alias="privateKey", description="Key used to sign the transaction.")

    def to_connection_options(self) -> ConnectionOptions:
        return ConnectionOptions(
            address=self.address or None,
            abi=self.abi or None,
            rpc_url=self.rpc_url or None,
            chain_id=self.chain_id,
            private_key=self.private_key or None,
        )


class OptionsRequest(ApiModel):
    """Body for write endpoints that take no arguments besides connection options."""

    options: Optional[ConnectionOptionsPayload] = None

    def connection_options(self) -> Optional[ConnectionOptions]:
        return self.options.to_connection_options() if self.options else None


class ScheduleClassRequest(OptionsRequest):
    metadata_uri: RequiredString = Field(..., alias="metadataURI", examples=["ipfs://bafy.../class.json"])
    start_time: RequiredValue = Field(..., alias="startTime", description="Unix timestamp (seconds).")
    end_time: RequiredValue = Field(..., alias="endTime", description="Unix timestamp (seconds).")
    capacity: RequiredValue = Field(..., examples=[30])
    reward_amount: RequiredValue = Field(..., alias="rewardAmount", examples=["1000000000000000000"])

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "metadataURI": "ipfs://bafybeigdyrzt/class-42.json",
                "startTime": 1767261600,
                "endTime": 1767265200,
                "capacity": 30,
                "rewardAmount": "1000000000000000000",
            }
        }
    )


class UpdateClassRequest(OptionsRequest):
    metadata_uri: RequiredString = Field(..., alias="metadataURI")
    capacity: RequiredValue
    reward_amount: RequiredValue = Field(..., alias="rewardAmount")


class RescheduleClassRequest(OptionsRequest):
    start_time: RequiredValue = Field(..., alias="startTime")
    end_time: RequiredValue = Field(..., alias="endTime")


class EnrollRequest(OptionsRequest):
    student: RequiredString


class SetAttendanceRequest(OptionsRequest):
    student: RequiredString
    attended: BooleanFlag


class AmountRequest(OptionsRequest):
    amount: RequiredValue


class ApproveRequest(AmountRequest):
    spender: RequiredString


class TransferRequest(AmountRequest):
    to: RequiredString


class TransferFromRequest(AmountRequest):
    sender: RequiredString = Field(..., alias="from")
    to: RequiredString


class AccountAmountRequest(AmountRequest):
    account: RequiredString


class StudentAmountRequest(AmountRequest):
    student: RequiredString


# ============================================================================
# Response Schemas
# ============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: T


class ErrorBody(ApiModel):
    message: str
    details: Optional[Any] = None


class ApiErrorResponse(ApiModel):
    success: bool = False
    error: ErrorBody


class StatusData(ApiModel):
    status: str


class VersionData(ApiModel):
    version: str
    api_prefix: str = Field(..., alias="apiPrefix")


class ContractResultData(ApiModel):
    result: Any = Field(default=None, description="Transaction receipt.")
    tx_hash: Optional[str] = Field(default=None, alias="txHash")


class ClassDetailsData(ApiModel):
    metadata_uri: str = Field(..., alias="metadataURI")
    start_time: Uint256 = Field(..., alias="startTime")
    end_time: Uint256 = Field(..., alias="endTime")
    capacity: Uint256
    reward_amount: Uint256 = Field(..., alias="rewardAmount")
    instructor: str
    cancelled: bool
    completed: bool


class CountData(ApiModel):
    count: Uint256


class AttendedData(ApiModel):
    attended: bool


class EnrolledData(ApiModel):
    enrolled: bool


class LinkedTokenData(ApiModel):
    address: str


class TokenMetadataData(ApiModel):
    name: str
    symbol: str
    decimals: int


class TotalSupplyData(ApiModel):
    total_supply: Uint256 = Field(..., alias="totalSupply")


class BalanceData(ApiModel):
    balance: Uint256
    account: str


class AllowanceData(ApiModel):
    owner: str
    spender: str
    allowance: Uint256


class ContractInfo(ApiModel):
    name: str
    address: str
    chain_id: Optional[int] = Field(default=None, alias="chainId")
    rpc_url: Optional[str] = Field(default=None, alias="rpcUrl")
