"""
Exception handlers for the LearningGrowth server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers
from .http_error import HttpError

__all__ = ["HttpError", "setup_exception_handlers"]
