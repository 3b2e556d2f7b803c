"""
Extension Transformation Utilities

Common utilities used across the application.
"""

from .raw_json import extract_raw_member, splice_raw_member

__all__ = [
    "extract_raw_member",
    "splice_raw_member",
]
