"""
Transformation service client.

Function names are mapped to route segments through a static table, so the
externally visible name need not match the service's path naming. One route
selects both the host and the path:

    {transformation_url_template.format(route=route)}/extension/transformation/{route}?token=...

Usage:
    async with TransformationClient(template, {"AggregateAccumulative": "aggregate-accumulative"}) as client:
        await client.dispatch(params, params.token, query)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from extension_transformation.errors import DispatchRejected, UnknownFunction
from extension_transformation.integrations.base import ServiceClient, ServiceConfig
from extension_transformation.schemas import FunctionParams

logger = logging.getLogger(__name__)


class TransformationClient(ServiceClient):
    """Client delivering function bundles to transformation services."""

    def __init__(
        self,
        url_template: str,
        routes: Mapping[str, str],
        config: ServiceConfig | None = None,
        **kwargs,
    ):
        """
        Initialize transformation client.

        Args:
            url_template: Base URL template containing {route}
            routes: Function name to route segment
            config: Connection bounds
        """
        super().__init__(config, **kwargs)
        self.url_template = url_template
        self.routes: Mapping[str, str] = MappingProxyType(dict(routes))

    @property
    def name(self) -> str:
        """Integration name."""
        return "transformation"

    def route_for(self, function: str) -> str:
        """
        Route segment of a function.

        Raises:
            UnknownFunction: If the function has no configured route
        """
        route = self.routes.get(function)
        if not route:
            raise UnknownFunction(function)
        return route

    def dispatch_url(self, function: str, token: str, query: str = "") -> str:
        """URL a function bundle is posted to."""
        route = self.route_for(function)
        url = (
            f"{self.url_template.format(route=route)}"
            f"/extension/transformation/{route}?token={token}"
        )
        if query:
            url = f"{url}&{query}"
        return url

    async def dispatch(self, params: FunctionParams, token: str, query: str = "") -> None:
        """
        Deliver a function bundle.

        Args:
            params: Assembled bundle
            token: Correlation token echoed back on callback
            query: Raw caller query string, appended after the token

        Raises:
            UnknownFunction: If the function has no configured route
            DispatchRejected: On a non-success status
            UpstreamUnavailable: If the service cannot be reached
        """
        url = self.dispatch_url(params.function, token, query)
        logger.info(
            f"[transformation] Trigger {params.function} for extension={params.extension_id} "
            f"inputs={len(params.input_variables)} outputs={len(params.output_variables)}"
        )

        response = await self._request("POST", url, content=params.to_json())
        if not response.is_success:
            raise DispatchRejected(params.extension, self.route_for(params.function))
