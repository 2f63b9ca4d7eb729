"""
LearningGrowth Server Package.

This package contains the HTTP API exposing the ClassScheduler and
LearningPointsToken contract services.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    exception_handlers: Mapping of exceptions onto the error envelope.
    middleware: Request logging and timing.
    schemas: Pydantic schemas for API request/response validation.
"""
