"""
Schemas for the application.

This module exports the Pydantic models used for response envelopes.
"""

from app.schemas.catalog import (
    Record,
    SuccessResponse,
    RecordListResponse,
    ErrorResponse,
)

__all__ = [
    "Record",
    "SuccessResponse",
    "RecordListResponse",
    "ErrorResponse",
]
