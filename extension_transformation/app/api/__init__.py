"""
Extension Transformation API routers.
"""

from extension_transformation.app.api.extension import router as extension_router

__all__ = ["extension_router"]
