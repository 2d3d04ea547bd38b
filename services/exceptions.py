# -*- coding: utf-8 -*-
"""Custom exceptions for the application."""

RATE_LIMIT_STATUS = 429


class ApiException(Exception):
    """Exception raised for API errors."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, context: str = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.context = context

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class DraftNotFoundException(ApiException):
    """The draft does not exist or is not owned by the caller."""

    def __init__(self, draft_id: str, response_data: dict = None):
        super().__init__(
            f"Memorial draft not found: {draft_id}",
            status_code=404,
            response_data=response_data,
            context="draft"
        )
        self.draft_id = draft_id


class ValidationException(Exception):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field: str = None,
                 errors: list = None, context: str = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or []
        self.context = context


class NetworkException(Exception):
    """Exception raised for network/connection errors."""

    def __init__(self, message: str, original_error: Exception = None,
                 context: str = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context


def is_rate_limited(error: Exception) -> bool:
    """True when the store rejected a write for arriving too soon after the previous one."""
    return isinstance(error, ApiException) and error.status_code == RATE_LIMIT_STATUS
