"""
Extension Transformation Configuration

Environment-driven settings.
"""

from .schemas import DEFAULT_FUNCTION_ROUTES, AppSettings

__all__ = [
    "AppSettings",
    "DEFAULT_FUNCTION_ROUTES",
]
