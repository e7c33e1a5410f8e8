"""
API Dependencies package.

Authentication and access to the lifespan-managed services.
"""

from .auth import verify_api_key, API_AUTH_ENABLED
from .services import get_settings, get_store, get_caller, get_reactor

__all__ = [
    "verify_api_key",
    "API_AUTH_ENABLED",
    "get_settings",
    "get_store",
    "get_caller",
    "get_reactor",
]
