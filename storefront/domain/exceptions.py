"""Domain exceptions for the storefront gateway.

Every failure a gateway operation reports is one of these. Both gateway
modes raise the same classes, so callers never branch on which backend is
active. Fallback-mode paths never raise anything outside this module.
"""

from typing import Any

from storefront.core.constants import REQUEST_TIMEOUT_MESSAGE


class StorefrontException(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. email, operation).
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class UserNotFoundException(StorefrontException):
    """Raised when no account is registered under the given email."""

    def __init__(self, email: str | None = None) -> None:
        details = {"email": email} if email else {}
        super().__init__("User not found", "USER_NOT_FOUND", details)


class WrongPasswordException(StorefrontException):
    """Raised when a password does not match the account's stored password."""

    def __init__(self, message: str = "Wrong password") -> None:
        super().__init__(message, "WRONG_PASSWORD")


class NoCurrentUserException(StorefrontException):
    """Raised when an operation needs a signed-in session and there is none."""

    def __init__(self, message: str = "No user signed in") -> None:
        super().__init__(message, "NO_CURRENT_USER")


class OperationNotSupportedException(StorefrontException):
    """Raised when the active backend cannot perform the operation.

    In fallback mode this covers social sign-in and catalog mutations.
    """

    def __init__(self, operation: str, message: str | None = None) -> None:
        """Initialize with the operation name and optional guidance.

        Args:
            operation: Gateway operation that was attempted.
            message: Human-readable message; a generic one is built when omitted.
        """
        super().__init__(
            message or f"{operation} is not available in demo mode",
            "OPERATION_NOT_SUPPORTED",
            {"operation": operation},
        )


class RequestTimeoutException(StorefrontException):
    """Raised when a catalog fetch loses the race against its timeout. Retryable."""

    retryable = True

    def __init__(self, timeout_seconds: float | None = None) -> None:
        details = {"timeout_seconds": timeout_seconds} if timeout_seconds is not None else {}
        super().__init__(REQUEST_TIMEOUT_MESSAGE, "REQUEST_TIMEOUT", details)


class BackendException(StorefrontException):
    """Error reported by the live backend, surfaced with its own code and message."""

    def __init__(
        self,
        message: str,
        code: str = "BACKEND_ERROR",
        status_code: int | None = None,
    ) -> None:
        """Initialize with the backend's message and code.

        Args:
            message: Message from the backend (or a fallback description).
            code: Backend error code, e.g. EMAIL_EXISTS or HTTP_503.
            status_code: HTTP status of the failed call, when there was one.
        """
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, code, details)


class ConfigurationException(StorefrontException):
    """Raised when the Firebase credentials bundle cannot start a live backend."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")
