"""
Pydantic schemas for the catalog API.
Records are header-defined, so request bodies and record payloads are plain
mappings; only the response envelopes have fixed shapes.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


Record = Dict[str, Any]


class SuccessResponse(BaseModel):
    """Generic success envelope"""
    status: str = "success"
    data: Optional[Any] = None
    message: Optional[str] = None


class RecordListResponse(SuccessResponse):
    """Success envelope for record lists"""
    data: List[Record] = []
    total: int = Field(0, description="Number of records returned")


class ErrorResponse(BaseModel):
    """Generic error envelope"""
    status: str = "error"
    message: str = Field(..., description="Human-readable failure reason")
