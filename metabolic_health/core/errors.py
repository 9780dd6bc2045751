"""
Error taxonomy for the service. Each error carries the HTTP status and a client-safe message;
main.py turns them into JSON responses.
"""
from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    """Base class for errors reported to the caller."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(ServiceError):
    """Malformed or missing input. Always user-correctable."""

    status_code = 400
    message = "Invalid data"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class DuplicateUser(ServiceError):
    status_code = 400
    message = "User already exists"


class InvalidCredentials(ServiceError):
    # Same message for unknown email and wrong password
    status_code = 401
    message = "Invalid credentials"


class Unauthenticated(ServiceError):
    status_code = 401
    message = "Invalid or expired token"


class UserNotFound(ServiceError):
    status_code = 404
    message = "User not found"


class NotFound(ServiceError):
    status_code = 404
    message = "Not found"


class StorageError(ServiceError):
    """Backing-store failure. Detail stays in server logs."""

    status_code = 500
    message = "Storage failure"
