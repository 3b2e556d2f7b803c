"""
Extension Transformation - orchestration relay for time-series transformations.

The relay accepts a request to run a named extension against a set of
variables, fetches the current data of the input variables from their
storage adapters, and forwards the assembled bundle to the transformation
service of the requested function. Computed outputs come back later on a
callback and are written back to storage.

Quick Start:
    >>> from extension_transformation import AppSettings, Extension, create_relay
    >>> relay = create_relay(AppSettings())
    >>> token = await relay.trigger(Extension.from_json(body), "start=2024-01-01")

Run the service:
    python -m extension_transformation.app.main
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports for convenient imports
from extension_transformation.app.dependencies import create_relay
from extension_transformation.config import AppSettings
from extension_transformation.errors import (
    DataFetchFailed,
    DispatchRejected,
    MalformedRequestBody,
    RelayError,
    SeriesNotFound,
    UnknownFunction,
    UpstreamUnavailable,
    WriteFailed,
)
from extension_transformation.relay import TransformationRelay
from extension_transformation.schemas import (
    DataVariable,
    Extension,
    FunctionParams,
    FunctionResponse,
    Point,
    Timeseries,
    Variable,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Service
    "AppSettings",
    "TransformationRelay",
    "create_relay",
    # Schemas
    "DataVariable",
    "Extension",
    "FunctionParams",
    "FunctionResponse",
    "Point",
    "Timeseries",
    "Variable",
    # Errors
    "DataFetchFailed",
    "DispatchRejected",
    "MalformedRequestBody",
    "RelayError",
    "SeriesNotFound",
    "UnknownFunction",
    "UpstreamUnavailable",
    "WriteFailed",
]
