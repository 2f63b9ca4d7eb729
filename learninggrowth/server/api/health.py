"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from learninggrowth.server.core import constant
from learninggrowth.server.schemas import ApiResponse, StatusData, VersionData

from .responses import success

router = APIRouter()


@router.get(
    "/health",
    response_model=ApiResponse[StatusData],
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Does not touch the blockchain; it only confirms the server is running and reachable.
    """
    return success(StatusData(status="ok"))


@router.get(
    "/version",
    response_model=ApiResponse[VersionData],
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return success(VersionData(version=constant.VERSION, api_prefix=constant.API_PREFIX))
