"""
Pytest configuration and fixtures for extension transformation tests.
"""

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from extension_transformation import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from extension_transformation.config import AppSettings  # noqa: E402


class RecordingTransport(httpx.MockTransport):
    """
    Mock HTTP transport that records every request.

    Usage:
        transport = RecordingTransport(lambda request: httpx.Response(200, json=[]))
        client = AdapterClient(template, transport=transport)
        ...
        assert transport.requests[0].url.path == "/timeseries/ts-1"
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def requests_to(self, host_prefix: str) -> list[httpx.Request]:
        """Requests whose host starts with a prefix."""
        return [r for r in self.requests if r.url.host.startswith(host_prefix)]


def make_variable(variable_id: str, timeseries_id: str, value_type: str = "Scalar") -> dict:
    """Catalog entry in wire format."""
    return {
        "variableId": variable_id,
        "timeseries": {
            "timeseriesId": timeseries_id,
            "moduleId": "HEC-HMS",
            "valueType": value_type,
            "parameterId": "Precipitation",
            "locationId": "Hanwella",
            "timeseriesType": "ExternalHistorical",
            "timeStepId": "each_hour",
        },
    }


@pytest.fixture
def settings():
    """Settings with the default routing table."""
    return AppSettings()


@pytest.fixture
def sample_points():
    """Points as returned by a storage adapter."""
    return [
        {"time": "2024-01-01T00:00:00Z", "value": 1.5},
        {"time": "2024-01-01T01:00:00Z", "value": 2.0},
        {"time": "2024-01-01T02:00:00Z", "value": 0.25},
    ]


@pytest.fixture
def sample_options_text():
    """Options exactly as a caller might format them."""
    return '{ "window": 3600,  "threshold": 1.50, "nested": {"flags": [true, null]} }'


@pytest.fixture
def sample_extension(sample_options_text):
    """Trigger body with two inputs and one output."""
    data = {
        "extensionId": "ext-001",
        "extension": "Transformation",
        "function": "AggregateAccumulative",
        "data": {
            "inputVariables": ["rain_a", "rain_b"],
            "outputVariables": ["total"],
            "variables": [
                make_variable("rain_a", "ts-rain-a"),
                make_variable("rain_b", "ts-rain-b", value_type="Grid"),
                make_variable("total", "ts-total"),
            ],
        },
    }
    encoded = json.dumps(data)
    return encoded[:-1] + ', "options": ' + sample_options_text + "}"
