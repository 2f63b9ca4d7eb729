"""
Class Scheduling API Endpoints.

This module exposes the ClassScheduler contract: scheduling and editing
classes, managing enrollments and attendance, completing classes and paying
out rewards, plus the read-only views over classes and students.

Write endpoints return the mined transaction receipt and its hash. Every write
body accepts an optional ``options`` object to target another contract
address, RPC endpoint or signing key for that request only.

Note: the fixed ``/count`` and ``/learning-token`` routes are declared before
``/{classId}`` so they are not captured as class ids.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Path

from learninggrowth.server.schemas import (
    ApiResponse,
    AttendedData,
    ClassDetailsData,
    ContractResultData,
    CountData,
    EnrolledData,
    EnrollRequest,
    LinkedTokenData,
    OptionsRequest,
    RescheduleClassRequest,
    ScheduleClassRequest,
    SetAttendanceRequest,
    UpdateClassRequest,
)
from learninggrowth.services import class_scheduler as scheduler_service

from .responses import contract_result, ensure_non_empty_string, options_of, success

router = APIRouter()

ClassId = Annotated[str, Path(alias="classId", description="Identifier of the class (decimal or 0x-prefixed).")]
Student = Annotated[str, Path(description="Wallet address of the student.")]


# ============================================================================
# Writes
# ============================================================================


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[ContractResultData],
    summary="Schedule Class",
    description="Schedule a new class on the ClassScheduler contract.",
    response_description="Receipt of the scheduling transaction.",
)
async def schedule_class(payload: ScheduleClassRequest):
    execution = await scheduler_service.schedule_class(
        payload.metadata_uri,
        payload.start_time,
        payload.end_time,
        payload.capacity,
        payload.reward_amount,
        payload.connection_options(),
    )
    return contract_result(execution)


@router.put(
    "/{classId}",
    response_model=ApiResponse[ContractResultData],
    summary="Update Class",
    description="Update the metadata URI, capacity and reward of an existing class.",
)
async def update_class(class_id: ClassId, payload: UpdateClassRequest):
    execution = await scheduler_service.update_class(
        ensure_non_empty_string(class_id, "classId"),
        payload.metadata_uri,
        payload.capacity,
        payload.reward_amount,
        payload.connection_options(),
    )
    return contract_result(execution)


@router.patch(
    "/{classId}/schedule",
    response_model=ApiResponse[ContractResultData],
    summary="Reschedule Class",
    description="Move a class to a new start and end time.",
)
async def reschedule_class(class_id: ClassId, payload: RescheduleClassRequest):
    execution = await scheduler_service.reschedule_class(
        ensure_non_empty_string(class_id, "classId"),
        payload.start_time,
        payload.end_time,
        payload.connection_options(),
    )
    return contract_result(execution)


@router.delete(
    "/{classId}",
    response_model=ApiResponse[ContractResultData],
    summary="Cancel Class",
    description="Cancel a scheduled class. The body is optional and may only carry connection options.",
)
async def cancel_class(class_id: ClassId, payload: Optional[OptionsRequest] = None):
    execution = await scheduler_service.cancel_class(ensure_non_empty_string(class_id, "classId"), options_of(payload))
    return contract_result(execution)


@router.post(
    "/{classId}/enrollments",
    status_code=201,
    response_model=ApiResponse[ContractResultData],
    summary="Enroll Student",
    description="Enroll a student in a class.",
)
async def enroll_student(class_id: ClassId, payload: EnrollRequest):
    execution = await scheduler_service.enroll_student(
        ensure_non_empty_string(class_id, "classId"),
        payload.student,
        payload.connection_options(),
    )
    return contract_result(execution)


@router.delete(
    "/{classId}/enrollments/{student}",
    response_model=ApiResponse[ContractResultData],
    summary="Unenroll Student",
    description="Remove a student from a class.",
)
async def unenroll_student(class_id: ClassId, student: Student, payload: Optional[OptionsRequest] = None):
    execution = await scheduler_service.unenroll_student(
        ensure_non_empty_string(class_id, "classId"),
        ensure_non_empty_string(student, "student"),
        options_of(payload),
    )
    return contract_result(execution)


@router.post(
    "/{classId}/attendance",
    response_model=ApiResponse[ContractResultData],
    summary="Set Attendance",
    description="Record whether a student attended a class.",
)
async def set_attendance(class_id: ClassId, payload: SetAttendanceRequest):
    execution = await scheduler_service.set_attendance(
        ensure_non_empty_string(class_id, "classId"),
        payload.student,
        payload.attended,
        payload.connection_options(),
    )
    return contract_result(execution)


@router.post(
    "/{classId}/complete",
    response_model=ApiResponse[ContractResultData],
    summary="Complete Class",
    description="Mark a class as completed.",
)
async def complete_class(class_id: ClassId, payload: Optional[OptionsRequest] = None):
    execution = await scheduler_service.complete_class(
        ensure_non_empty_string(class_id, "classId"), options_of(payload)
    )
    return contract_result(execution)


@router.post(
    "/{classId}/distribute-rewards",
    response_model=ApiResponse[ContractResultData],
    summary="Distribute Rewards",
    description="Pay the class reward to every student marked as attended.",
)
async def distribute_rewards(class_id: ClassId, payload: Optional[OptionsRequest] = None):
    execution = await scheduler_service.distribute_rewards(
        ensure_non_empty_string(class_id, "classId"), options_of(payload)
    )
    return contract_result(execution)


# ============================================================================
# Reads
# ============================================================================


@router.get(
    "/count",
    response_model=ApiResponse[CountData],
    summary="Count Classes",
    description="Number of classes scheduled so far.",
)
async def get_class_count():
    count = await scheduler_service.get_class_count()
    return success(CountData(count=count))


@router.get(
    "/learning-token",
    response_model=ApiResponse[LinkedTokenData],
    summary="Get Linked Token",
    description="Address of the LearningPointsToken contract the scheduler pays rewards in.",
)
async def get_linked_learning_token():
    address = await scheduler_service.get_linked_learning_token()
    return success(LinkedTokenData(address=address))


@router.get(
    "/{classId}",
    response_model=ApiResponse[ClassDetailsData],
    summary="Get Class",
    description="Retrieve the details of a class.",
)
async def get_class_details(class_id: ClassId):
    details = await scheduler_service.get_class_details(ensure_non_empty_string(class_id, "classId"))
    return success(
        ClassDetailsData(
            metadata_uri=details.metadata_uri,
            start_time=details.start_time,
            end_time=details.end_time,
            capacity=details.capacity,
            reward_amount=details.reward_amount,
            instructor=details.instructor,
            cancelled=details.cancelled,
            completed=details.completed,
        )
    )


@router.get(
    "/{classId}/students",
    response_model=ApiResponse[List[str]],
    summary="List Enrolled Students",
    description="Addresses of the students enrolled in a class.",
)
async def get_enrolled_students(class_id: ClassId):
    students = await scheduler_service.get_enrolled_students(ensure_non_empty_string(class_id, "classId"))
    return success(students)


@router.get(
    "/{classId}/students/{student}/attendance",
    response_model=ApiResponse[AttendedData],
    summary="Get Attendance",
    description="Whether a student attended a class.",
)
async def has_student_attended(class_id: ClassId, student: Student):
    attended = await scheduler_service.has_student_attended(
        ensure_non_empty_string(class_id, "classId"), ensure_non_empty_string(student, "student")
    )
    return success(AttendedData(attended=attended))


@router.get(
    "/{classId}/students/{student}",
    response_model=ApiResponse[EnrolledData],
    summary="Get Enrollment",
    description="Whether a student is enrolled in a class.",
)
async def is_student_enrolled(class_id: ClassId, student: Student):
    enrolled = await scheduler_service.is_student_enrolled(
        ensure_non_empty_string(class_id, "classId"), ensure_non_empty_string(student, "student")
    )
    return success(EnrolledData(enrolled=enrolled))
