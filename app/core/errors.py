from typing import Any, Dict


class AppError(Exception):
    status_code: int = 500
    error_code: str = "UNKNOWN_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "message": self.message,
            "error_code": self.error_code,
        }


class ValidationError(AppError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class UnauthorizedError(AppError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "FORBIDDEN_ERROR"


class NotFoundError(AppError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    error_code = "CONFLICT_ERROR"


class ConfigurationError(AppError):
    status_code = 422
    error_code = "CONFIGURATION_ERROR"


class StorageError(AppError):
    status_code = 500
    error_code = "DATABASE_ERROR"


class ProviderError(AppError):
    status_code = 502
    error_code = "PROVIDER_ERROR"
