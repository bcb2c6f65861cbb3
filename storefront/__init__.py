"""Storefront data-access gateway.

One async contract for authentication and catalog operations, served either
by the live Firebase backend or by an in-memory simulation of it.
"""

from storefront.infrastructure.gateway.factory import create_gateway
from storefront.shared.telemetry.logging import setup_logging

__all__ = ["create_gateway", "setup_logging"]
