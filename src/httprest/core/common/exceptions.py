"""
Common exception classes for httprest.

This module defines custom exception classes used throughout the library
for better error handling and categorization.
"""

from __future__ import annotations


class HttpRestError(Exception):
    """Base exception class for all httprest errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        *,
        status_code: int | None = None,
        **kwargs,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            status_code: Optional HTTP status code hint
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code or 500
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        error_dict = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
            "status_code": self.status_code,
        }
        return {"error": error_dict}


class HttpRequestError(HttpRestError):
    """Raised when an HTTP request fails.

    Mirrors the usual three constructors: no arguments, a message, or a
    message together with the error that caused it.
    """

    DEFAULT_MESSAGE = "An error occurred while sending the request."

    def __init__(
        self,
        message: str | None = None,
        inner_exception: BaseException | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        status_code = kwargs.pop("status_code", None)
        super().__init__(
            message if message is not None else self.DEFAULT_MESSAGE,
            details,
            status_code=status_code,
            **kwargs,
        )
        self.inner_exception = inner_exception
        if inner_exception is not None:
            self.__cause__ = inner_exception


class HttpRequestTimeoutError(HttpRequestError):
    """Raised when a request does not complete within the configured timeout."""

    def __init__(
        self,
        message: str = "The request timed out",
        inner_exception: BaseException | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        kwargs.setdefault("status_code", 408)
        super().__init__(message, inner_exception, details, **kwargs)


class ConfigurationError(HttpRestError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class InvalidRequestError(HttpRestError):
    """Raised when a request object cannot be turned into an HTTP message."""

    def __init__(
        self, message: str = "Invalid request", details: dict | None = None, **kwargs
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class ServiceResolutionError(HttpRestError):
    """Raised when service resolution fails in DI container."""

    def __init__(
        self,
        message: str = "Service resolution failed",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=500, **kwargs)


class RequestBuilderNotFoundError(HttpRestError):
    """Raised when no registered request builder accepts a capability."""

    def __init__(
        self,
        message: str = "No request builder found",
        target_type: type | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if target_type is not None:
            det.setdefault("target_type", target_type.__name__)
        super().__init__(message, det, status_code=500)
        self.target_type = target_type


class ResponseBuilderNotFoundError(HttpRestError):
    """Raised when no registered response builder accepts a response."""

    def __init__(
        self,
        message: str = "No response builder found",
        status_code: int | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if status_code is not None:
            det.setdefault("response_status_code", status_code)
        super().__init__(message, det, status_code=500)
