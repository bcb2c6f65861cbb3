"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and infrastructure layers.
"""

from storefront.domain.enums import AuthPersistence, GatewayMode, UserRole
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

__all__ = [
    # Enums
    "AuthPersistence",
    "GatewayMode",
    "UserRole",
    # Exceptions
    "BackendException",
    "ConfigurationException",
    "NoCurrentUserException",
    "OperationNotSupportedException",
    "RequestTimeoutException",
    "StorefrontException",
    "UserNotFoundException",
    "WrongPasswordException",
]
