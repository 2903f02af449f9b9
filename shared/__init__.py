"""
Shared modules for the Clinic Portal client.

This package contains shared configuration and wire constants used across the application.
"""

from shared.api_config import (
    ENDPOINTS,
    NO_FILTER_SENTINEL,
    ROLE_STORAGE_KEY,
    TOKEN_STORAGE_KEY,
)

__all__ = [
    "ENDPOINTS",
    "NO_FILTER_SENTINEL",
    "ROLE_STORAGE_KEY",
    "TOKEN_STORAGE_KEY",
]
