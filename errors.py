"""
Application errors raised by the services.

Only these variants are mapped to client errors by the handlers in main.py;
anything else is a 500.
"""
from typing import List, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationFailed(AppError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class NotFound(AppError):
    status_code = 404
