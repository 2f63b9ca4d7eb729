"""ClassScheduler contract service.

One coroutine per contract method. Numeric arguments accept ints or numeric
strings and are coerced with :func:`to_uint`; student arguments are
checksummed with :func:`to_address`. Connection details default to the
configured ``CLASS_SCHEDULER_ADDRESS`` and the bundled ABI and can be
overridden per call with :class:`ConnectionOptions`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Callable, List, Optional, TypeVar

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
from learninggrowth.chain.errors import ConfigurationError, ContractResponseError
from learninggrowth.core.config import load_contract_addresses, settings

CONTRACT_NAME = "ClassScheduler"

T = TypeVar("T")


@dataclass(frozen=True)
class ClassDetails:
    metadata_uri: str
    start_time: int
    end_time: int
    capacity: int
    reward_amount: int
    instructor: str
    cancelled: bool
    completed: bool


@lru_cache(maxsize=1)
def get_class_scheduler_abi() -> Abi:
    """Load the configured ClassScheduler ABI once per process."""
    return load_abi(settings.class_scheduler_abi_path)


def _resolve_options(options: Optional[ConnectionOptions]) -> ConnectionOptions:
    options = options or ConnectionOptions()
    address = options.address or load_contract_addresses().class_scheduler
    if not address:
        raise ConfigurationError(
            "No ClassScheduler contract address was provided. "
            "Set CLASS_SCHEDULER_ADDRESS or pass an address explicitly."
        )
    return replace(options, address=address, abi=options.abi or get_class_scheduler_abi())


def get_class_scheduler_contract(options: Optional[ConnectionOptions] = None) -> ConnectedContract:
    return connect_read_only_contract(_resolve_options(options))


def get_class_scheduler_contract_with_signer(options: Optional[ConnectionOptions] = None) -> ConnectedContract:
    return connect_signer_contract(_resolve_options(options))


def map_class_details(raw: Any) -> ClassDetails:
    """
    Map a ``getClass`` result into :class:`ClassDetails`.

    The struct may come back as a mapping keyed by component name or as a
    positional tuple; both are accepted.

    Raises:
        ContractResponseError: If the result is not a struct or a field is missing.
    """
    is_mapping = isinstance(raw, Mapping)
    is_sequence = isinstance(raw, Sequence) and not isinstance(raw, (str, bytes))
    if not (is_mapping or is_sequence):
        raise ContractResponseError("The contract returned an invalid response for the class details.")

    def pick(key: str, index: int, transform: Callable[[Any], T]) -> T:
        if is_mapping and raw.get(key) is not None:
            return transform(raw[key])
        if is_sequence and index < len(raw) and raw[index] is not None:
            return transform(raw[index])
        raise ContractResponseError(f"Could not read the field {key} of the class.")

    return ClassDetails(
        metadata_uri=pick("metadataURI", 0, str),
        start_time=pick("startTime", 1, lambda value: to_int(value, "startTime")),
        end_time=pick("endTime", 2, lambda value: to_int(value, "endTime")),
        capacity=pick("capacity", 3, lambda value: to_int(value, "capacity")),
        reward_amount=pick("rewardAmount", 4, lambda value: to_int(value, "rewardAmount")),
        instructor=pick("instructor", 5, str),
        cancelled=pick("cancelled", 6, bool),
        completed=pick("completed", 7, bool),
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def schedule_class(
    metadata_uri: str,
    start_time: NumericValue,
    end_time: NumericValue,
    capacity: NumericValue,
    reward_amount: NumericValue,
    options: Optional[ConnectionOptions] = None,
) -> ContractExecutionResult:
    args = [
        metadata_uri,
        to_uint(start_time, "startTime"),
        to_uint(end_time, "endTime"),
        to_uint(capacity, "capacity"),
        to_uint(reward_amount, "rewardAmount"),
    ]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "scheduleClass", args)


async def update_class(
    class_id: NumericValue,
    metadata_uri: str,
    capacity: NumericValue,
    reward_amount: NumericValue,
    options: Optional[ConnectionOptions] = None,
) -> ContractExecutionResult:
    args = [
        to_uint(class_id, "classId"),
        metadata_uri,
        to_uint(capacity, "capacity"),
        to_uint(reward_amount, "rewardAmount"),
    ]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "updateClass", args)


async def reschedule_class(
    class_id: NumericValue,
    start_time: NumericValue,
    end_time: NumericValue,
    options: Optional[ConnectionOptions] = None,
) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId"), to_uint(start_time, "startTime"), to_uint(end_time, "endTime")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "rescheduleClass", args)


async def cancel_class(class_id: NumericValue, options: Optional[ConnectionOptions] = None) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "cancelClass", args)


async def enroll_student(
    class_id: NumericValue, student: str, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId"), to_address(student, "student")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "enrollStudent", args)


async def unenroll_student(
    class_id: NumericValue, student: str, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId"), to_address(student, "student")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "unenrollStudent", args)


async def set_attendance(
    class_id: NumericValue, student: str, attended: bool, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId"), to_address(student, "student"), bool(attended)]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "setAttendance", args)


async def complete_class(class_id: NumericValue, options: Optional[ConnectionOptions] = None) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "completeClass", args)


async def distribute_rewards(
    class_id: NumericValue, options: Optional[ConnectionOptions] = None
) -> ContractExecutionResult:
    args = [to_uint(class_id, "classId")]
    contract = get_class_scheduler_contract_with_signer(options)
    return await execute_write(contract, "distributeRewards", args)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_class_details(class_id: NumericValue, options: Optional[ConnectionOptions] = None) -> ClassDetails:
    args = [to_uint(class_id, "classId")]
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "getClass", args)
    return map_class_details(execution.result)


async def get_class_count(options: Optional[ConnectionOptions] = None) -> int:
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "getClassCount")
    return to_int(execution.result, "count")


async def get_enrolled_students(class_id: NumericValue, options: Optional[ConnectionOptions] = None) -> List[str]:
    args = [to_uint(class_id, "classId")]
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "getEnrolledStudents", args)

    if not isinstance(execution.result, (list, tuple)):
        raise ContractResponseError("The contract returned an unexpected format for the student list.")
    return [str(student) for student in execution.result]


async def has_student_attended(
    class_id: NumericValue, student: str, options: Optional[ConnectionOptions] = None
) -> bool:
    args = [to_uint(class_id, "classId"), to_address(student, "student")]
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "hasAttended", args)
    return bool(execution.result)


async def is_student_enrolled(
    class_id: NumericValue, student: str, options: Optional[ConnectionOptions] = None
) -> bool:
    args = [to_uint(class_id, "classId"), to_address(student, "student")]
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "isEnrolled", args)
    return bool(execution.result)


async def get_linked_learning_token(options: Optional[ConnectionOptions] = None) -> str:
    """Return the address of the token contract the scheduler pays rewards in."""
    contract = get_class_scheduler_contract(options)
    execution = await execute_read(contract, "learningToken")
    return str(execution.result)
