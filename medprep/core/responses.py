# medprep/core/responses.py
"""Uniform response envelope used by every API route."""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """`{success, data, error, message}` envelope."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


def error_content(message: str) -> Dict[str, Any]:
    """JSON body for a failed request."""
    return {"success": False, "error": message}
