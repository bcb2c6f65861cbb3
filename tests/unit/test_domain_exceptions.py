"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from storefront.domain.exceptions import (
    BackendException,
    ConfigurationException,
    NoCurrentUserException,
    OperationNotSupportedException,
    RequestTimeoutException,
    StorefrontException,
    UserNotFoundException,
    WrongPasswordException,
)


def test_storefront_exception_default_error_code() -> None:
    """Base StorefrontException uses class name as error_code when not provided."""
    exc = StorefrontException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "StorefrontException"
    assert exc.details == {}
    assert exc.retryable is False


def test_storefront_exception_custom_error_code_and_details() -> None:
    exc = StorefrontException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}
    assert str(exc) == "Oops"


def test_user_not_found_exception() -> None:
    """UserNotFoundException sets USER_NOT_FOUND and the email in details."""
    exc = UserNotFoundException("ghost@example.com")
    assert exc.message == "User not found"
    assert exc.error_code == "USER_NOT_FOUND"
    assert exc.details == {"email": "ghost@example.com"}
    assert UserNotFoundException().details == {}


def test_wrong_password_exception() -> None:
    exc = WrongPasswordException()
    assert exc.error_code == "WRONG_PASSWORD"
    assert exc.message == "Wrong password"


def test_no_current_user_exception() -> None:
    assert NoCurrentUserException().error_code == "NO_CURRENT_USER"
    assert NoCurrentUserException("Auth State Changed failed").message == (
        "Auth State Changed failed"
    )


def test_operation_not_supported_exception() -> None:
    """OperationNotSupportedException records the operation and builds a default message."""
    exc = OperationNotSupportedException("addProduct")
    assert exc.error_code == "OPERATION_NOT_SUPPORTED"
    assert exc.details == {"operation": "addProduct"}
    assert "addProduct" in exc.message

    custom = OperationNotSupportedException("signInWithGoogle", "Use the demo account")
    assert custom.message == "Use the demo account"


def test_request_timeout_exception_is_retryable() -> None:
    exc = RequestTimeoutException(15.0)
    assert exc.message == "Request timeout, please try again"
    assert exc.error_code == "REQUEST_TIMEOUT"
    assert exc.details == {"timeout_seconds": 15.0}
    assert exc.retryable is True


def test_backend_exception() -> None:
    exc = BackendException("EMAIL_EXISTS", "EMAIL_EXISTS", status_code=400)
    assert exc.error_code == "EMAIL_EXISTS"
    assert exc.details == {"status_code": 400}
    assert BackendException("boom").error_code == "BACKEND_ERROR"


def test_configuration_exception() -> None:
    exc = ConfigurationException("Firebase API key not found")
    assert exc.error_code == "CONFIGURATION_ERROR"


@pytest.mark.parametrize(
    "exc",
    [
        UserNotFoundException(),
        WrongPasswordException(),
        NoCurrentUserException(),
        OperationNotSupportedException("x"),
        RequestTimeoutException(),
        BackendException("x"),
        ConfigurationException("x"),
    ],
)
def test_all_inherit_from_storefront_exception(exc: Exception) -> None:
    assert isinstance(exc, StorefrontException)
