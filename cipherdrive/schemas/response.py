from typing import Generic, List, Optional, TypeVar
from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict


T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper for all endpoints"""
    success: bool = Field(True, description="Indicates if the request was successful")
    message: Optional[str] = Field(None, description="Human-readable message about the operation")
    data: Optional[T] = Field(None, description="Response data payload")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Folder created successfully",
                "data": {"id": "665f1f77bcf86cd799439011", "name": "Docs", "parent_id": "root"}
            }
        }
    )

class ErrorDetail(BaseModel):
    """Detailed error information for validation and business logic errors"""
    code: str = Field(..., description="Error code identifier")
    message: str = Field(..., description="Human-readable error message")
    field: Optional[str] = Field(None, description="Field name that caused the error (for validation errors)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "validation_error",
                "message": "Folder name is required.",
                "field": "name"
            }
        }
    )

class ApiError(BaseModel):
    """Error response wrapper for failed operations"""
    success: bool = Field(False, description="Always false for error responses")
    message: str = Field(..., description="Main error message")
    errors: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Cannot upload into a trashed folder.",
                "errors": [
                    {
                        "code": "precondition_failed",
                        "message": "Cannot upload into a trashed folder."
                    }
                ],
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
    )

class HealthCheck(BaseModel):
    """Health check response schema"""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Health check timestamp")
    version: Optional[str] = Field(None, description="API version")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "version": "1.0.0"
            }
        }
    )
