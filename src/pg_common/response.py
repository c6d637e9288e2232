"""Unified API response wrapper.

Every HTTP endpoint returns this envelope:
{
    "code": 0,           // 0 = success, otherwise an AppError code
    "message": "success",
    "data": { ... },     // null on error, or validation details
    "timestamp": "...",
    "request_id": "..."  // same ID the request log line carries
}

AppError and request validation errors are translated in src/main.py.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str, details: Any = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=details)
