"""
Configuration Schemas for the extension transformation relay.

AppSettings is populated from EXTENSION_TRANSFORMATION_* environment
variables by app.dependencies.get_settings().
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FUNCTION_ROUTES: dict[str, str] = {
    "AggregateAccumulative": "aggregate-accumulative",
}


class AppSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access. Settings are frozen; the routing
    tables are data, so adding a function or a value type is a
    configuration change.
    """

    model_config = ConfigDict(frozen=True)

    # Service identity
    service_name: str = "extension-transformation"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Listening address
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    # Callback base address attached to every function bundle
    callback_url: str = Field(
        "http://extension-transformation.default.svc.cluster.local/extension/transformation/callback",
        description="Address transformation services report results to",
    )

    # Address rules
    adapter_url_template: str = Field(
        "http://adapter-{value_type}.default.svc.cluster.local",
        description="Storage adapter base URL, {value_type} is the lower-cased value type",
    )
    transformation_url_template: str = Field(
        "http://transformation-{route}.default.svc.cluster.local",
        description="Transformation service base URL, {route} is the function route",
    )
    function_routes: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_FUNCTION_ROUTES),
        description="Function name to route segment",
    )

    # Outbound HTTP bounds
    request_timeout: float = Field(10.0, gt=0)
    connect_timeout: float = Field(5.0, gt=0)
    max_connections: int = Field(10, ge=1)
    keepalive_expiry: float = Field(30.0, ge=0)

    @field_validator("adapter_url_template")
    @classmethod
    def _check_adapter_template(cls, value: str) -> str:
        if "{value_type}" not in value:
            raise ValueError("adapter_url_template must contain {value_type}")
        return value.rstrip("/")

    @field_validator("transformation_url_template")
    @classmethod
    def _check_transformation_template(cls, value: str) -> str:
        if "{route}" not in value:
            raise ValueError("transformation_url_template must contain {route}")
        return value.rstrip("/")

    @property
    def routes(self) -> Mapping[str, str]:
        """Read-only view of the function routing table."""
        return MappingProxyType(self.function_routes)
