from typing import Any, Dict, List, Optional
from starlette import status

class AppError(Exception):
    default_status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "bad_request"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        field: Optional[str] = None,
        errors: Optional[List[dict]] = None,  # [{'code':..., 'message':..., 'field':...}]
        details: Optional[Dict[str, Any]] = None,  # Additional details for the error
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.code = code or self.default_code
        self.field = field
        self.errors = errors
        self.details = details


class ValidationError(AppError):
    """Malformed input, e.g. an empty folder name"""
    default_code = "validation_error"


class NotFoundError(AppError):
    """Entity is missing or owned by someone else"""
    default_status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class InvalidOperationError(AppError):
    """Operation is not legal in the entity's current state"""
    default_code = "invalid_operation"


class PreconditionError(AppError):
    """A state-dependent gate is not satisfied yet"""
    default_code = "precondition_failed"


class UnauthorizedError(AppError):
    default_status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "unauthorized"


class UpstreamError(AppError):
    """Metadata store or object store failure"""
    default_status_code = status.HTTP_502_BAD_GATEWAY
    default_code = "upstream_error"


ERROR_CLASSES: Dict[str, type] = {
    cls.default_code: cls
    for cls in (
        AppError,
        ValidationError,
        NotFoundError,
        InvalidOperationError,
        PreconditionError,
        UnauthorizedError,
        UpstreamError,
    )
}


def database_unavailable_error(exc: Exception) -> UpstreamError:
    """Build an UpstreamError with setup instructions for an unreachable database"""
    from cipherdrive.configs.settings import settings

    database = settings.MONGO_DB or "<MONGO_DB>"
    message = (
        f"MongoDB database \"{database}\" is not reachable at "
        f"{settings.MONGO_HOST or 'localhost'}:{settings.MONGO_PORT}.\n\n"
        "To fix this:\n"
        "1. Make sure the MongoDB server is provisioned and running\n"
        "2. Set MONGO_HOST, MONGO_PORT and MONGO_DB in .env\n"
        "3. Set MONGO_USER and MONGO_PWD if the server requires authentication\n\n"
        "Restart the API server after updating the configuration."
    )
    return UpstreamError(
        message,
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        details={"cause": str(exc)},
    )
