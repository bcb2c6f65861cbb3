"""Application ports (Protocols) implemented by infrastructure."""

from storefront.application.interfaces.gateway import AuthStateHandler, IDataGateway

__all__ = ["AuthStateHandler", "IDataGateway"]
