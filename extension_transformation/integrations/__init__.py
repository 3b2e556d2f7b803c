"""
Downstream Service Clients

- AdapterClient: per-value-type storage adapters (fetch and write points)
- TransformationClient: per-function transformation services (dispatch bundles)
"""

from extension_transformation.integrations.adapter import AdapterClient
from extension_transformation.integrations.base import ServiceClient, ServiceConfig
from extension_transformation.integrations.transformation import TransformationClient

__all__ = [
    "AdapterClient",
    "ServiceClient",
    "ServiceConfig",
    "TransformationClient",
]
