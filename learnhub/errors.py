"""
Error taxonomy

Repository functions raise these; main.py turns them into JSON responses.
Anything else that escapes a route becomes a logged 500.
"""

from typing import Dict, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized: Please log in"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class DuplicateUsernameError(ConflictError):
    # registration reports a taken username as a plain 400
    status_code = 400
    default_message = "Username already exists"
