"""Core: config and shared constants.

Single place for settings and shared constants.
"""

from storefront.core.config import FirebaseConfig, Settings, get_settings

__all__ = ["FirebaseConfig", "Settings", "get_settings"]
