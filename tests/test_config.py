"""
Tests for settings and dependency wiring.
"""

import pytest
from pydantic import ValidationError

from extension_transformation.app import dependencies
from extension_transformation.app.dependencies import create_relay, get_settings
from extension_transformation.config import DEFAULT_FUNCTION_ROUTES, AppSettings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.port == 8080
        assert settings.callback_url.endswith("/extension/transformation/callback")
        assert settings.routes == DEFAULT_FUNCTION_ROUTES

    def test_routes_are_read_only(self):
        with pytest.raises(TypeError):
            AppSettings().routes["X"] = "x"

    def test_settings_are_frozen(self):
        with pytest.raises(ValidationError):
            AppSettings().port = 9000

    def test_adapter_template_requires_placeholder(self):
        with pytest.raises(ValidationError, match="value_type"):
            AppSettings(adapter_url_template="http://adapter")

    def test_transformation_template_requires_placeholder(self):
        with pytest.raises(ValidationError, match="route"):
            AppSettings(transformation_url_template="http://transformation")


class TestGetSettings:
    """Tests for environment loading."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_TRANSFORMATION_PORT", "9090")
        monkeypatch.setenv("EXTENSION_TRANSFORMATION_CALLBACK_URL", "http://relay/callback")
        monkeypatch.setenv("EXTENSION_TRANSFORMATION_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv(
            "EXTENSION_TRANSFORMATION_FUNCTION_ROUTES", '{"MovingAverage": "moving-average"}'
        )

        settings = get_settings()

        assert settings.port == 9090
        assert settings.callback_url == "http://relay/callback"
        assert settings.request_timeout == 2.5
        assert dict(settings.routes) == {"MovingAverage": "moving-average"}

    def test_is_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_routes_json(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_TRANSFORMATION_FUNCTION_ROUTES", "{nope")
        with pytest.raises(ValueError, match="not valid JSON"):
            get_settings()

    def test_routes_must_be_strings(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_TRANSFORMATION_FUNCTION_ROUTES", '{"A": 1}')
        with pytest.raises(ValueError, match="object of strings"):
            get_settings()


class TestRelayWiring:
    """Tests for create_relay and the relay singleton."""

    def test_create_relay_uses_settings(self):
        settings = AppSettings(
            callback_url="http://cb",
            function_routes={"F": "f"},
            request_timeout=4.0,
        )

        relay = create_relay(settings)

        assert relay.assembler.callback_url == "http://cb"
        assert relay.transformation.route_for("F") == "f"
        assert relay.adapter.config.timeout == 4.0

    @pytest.mark.asyncio
    async def test_singleton_lifecycle(self):
        await dependencies.initialize_services()
        relay = dependencies.get_relay()
        assert dependencies.get_relay() is relay

        await dependencies.shutdown_services()
        assert dependencies._relay is None
