"""
Storage adapter client.

Each series value type is served by its own adapter service. The address
is derived from the value type alone:

    adapter_url_template.format(value_type=value_type.lower())

Usage:
    async with AdapterClient(template) as adapter:
        points = await adapter.fetch(variable, "start=2024-01-01")
        await adapter.write(data_variable)
"""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from extension_transformation.errors import SeriesNotFound
from extension_transformation.integrations.base import ServiceClient, ServiceConfig
from extension_transformation.schemas import DataVariable, Point, Variable

logger = logging.getLogger(__name__)

_points_adapter = TypeAdapter(list[Point] | None)


class AdapterClient(ServiceClient):
    """
    Client for per-value-type storage adapters.

    Provides methods for:
    - Fetching the data points of a series
    - Writing (upserting) the data points of a series
    """

    def __init__(
        self,
        url_template: str,
        config: ServiceConfig | None = None,
        **kwargs,
    ):
        """
        Initialize adapter client.

        Args:
            url_template: Base URL template containing {value_type}
            config: Connection bounds
        """
        super().__init__(config, **kwargs)
        self.url_template = url_template

    @property
    def name(self) -> str:
        """Integration name."""
        return "adapter"

    def base_url(self, value_type: str) -> str:
        """Adapter address for a value type."""
        return self.url_template.format(value_type=value_type.lower())

    def timeseries_url(self, variable: Variable, query: str = "") -> str:
        """URL of a series on its adapter, with the caller query appended verbatim."""
        series = variable.timeseries
        url = f"{self.base_url(series.value_type)}/timeseries/{series.timeseries_id}"
        if query:
            url = f"{url}?{query}"
        return url

    async def fetch(self, variable: Variable, query: str = "") -> list[Point]:
        """
        Get the data points of a variable's series.

        Args:
            variable: Variable whose series is read
            query: Raw query string forwarded to the adapter (e.g. time range)

        Returns:
            Points in the order the adapter returned them

        Raises:
            SeriesNotFound: On a non-success status or unreadable body
            UpstreamUnavailable: If the adapter cannot be reached
        """
        series_id = variable.timeseries.timeseries_id
        response = await self._request("GET", self.timeseries_url(variable, query))

        if not response.is_success:
            raise SeriesNotFound(f'Unable to find Timeseries: "{series_id}"', series_id)

        try:
            points = _points_adapter.validate_json(response.content) or []
        except ValidationError as e:
            logger.warning(f"[adapter] Invalid points for {series_id}: {e.error_count()} errors")
            raise SeriesNotFound(f'Invalid data for Timeseries: "{series_id}"', series_id) from e

        logger.info(f"[adapter] Fetched {len(points)} points for {series_id}")
        return points

    async def write(self, variable: DataVariable) -> None:
        """
        Write the data points of a bound variable to its series.

        The adapter either accepts the whole sequence or the call fails.

        Raises:
            SeriesNotFound: On a non-success status
            UpstreamUnavailable: If the adapter cannot be reached
        """
        series_id = variable.timeseries.timeseries_id
        body = json.dumps([point.to_api_dict() for point in variable.data])
        response = await self._request("POST", self.timeseries_url(variable), content=body)

        if not response.is_success:
            raise SeriesNotFound(
                f'Unable to find Timeseries for save data: "{series_id}"', series_id
            )

        logger.info(f"[adapter] Saved {len(variable.data)} points for {series_id}")
