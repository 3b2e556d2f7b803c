"""
Dependency Injection for the extension transformation relay.

Provides singleton instances of settings, downstream clients and the relay.
Routes receive the relay through FastAPI's Depends(get_relay), so tests can
replace it with app.dependency_overrides.
"""
from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Optional

from extension_transformation.assembler import PayloadAssembler
from extension_transformation.config import DEFAULT_FUNCTION_ROUTES, AppSettings
from extension_transformation.integrations import AdapterClient, ServiceConfig, TransformationClient
from extension_transformation.relay import TransformationRelay

logger = logging.getLogger(__name__)

ENV_PREFIX = "EXTENSION_TRANSFORMATION_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _load_function_routes() -> dict[str, str]:
    """
    Read the function routing table.

    EXTENSION_TRANSFORMATION_FUNCTION_ROUTES holds a JSON object mapping
    function names to route segments.
    """
    raw = os.getenv(f"{ENV_PREFIX}FUNCTION_ROUTES")
    if not raw:
        return dict(DEFAULT_FUNCTION_ROUTES)

    try:
        routes = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{ENV_PREFIX}FUNCTION_ROUTES is not valid JSON: {e}") from e

    if not isinstance(routes, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in routes.items()
    ):
        raise ValueError(f"{ENV_PREFIX}FUNCTION_ROUTES must be a JSON object of strings")
    return routes


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    defaults = AppSettings()
    return AppSettings(
        # Service
        service_name=_env("SERVICE_NAME", defaults.service_name),
        environment=_env("ENVIRONMENT", defaults.environment),
        debug=_env("DEBUG", "false").lower() == "true",
        log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        # Listening address
        host=_env("HOST", defaults.host),
        port=int(_env("PORT", str(defaults.port))),
        # Routing
        callback_url=_env("CALLBACK_URL", defaults.callback_url),
        adapter_url_template=_env("ADAPTER_URL_TEMPLATE", defaults.adapter_url_template),
        transformation_url_template=_env(
            "TRANSFORMATION_URL_TEMPLATE", defaults.transformation_url_template
        ),
        function_routes=_load_function_routes(),
        # Outbound HTTP
        request_timeout=float(_env("REQUEST_TIMEOUT", str(defaults.request_timeout))),
        connect_timeout=float(_env("CONNECT_TIMEOUT", str(defaults.connect_timeout))),
        max_connections=int(_env("MAX_CONNECTIONS", str(defaults.max_connections))),
        keepalive_expiry=float(_env("KEEPALIVE_EXPIRY", str(defaults.keepalive_expiry))),
    )


# Global instances (initialized on first access)
_relay: Optional[TransformationRelay] = None


def create_relay(settings: AppSettings, **client_kwargs) -> TransformationRelay:
    """
    Build a relay and its clients from settings.

    Args:
        settings: Application settings
        **client_kwargs: Passed to both clients (e.g. transport=)
    """
    config = ServiceConfig.from_settings(settings)
    adapter = AdapterClient(settings.adapter_url_template, config, **client_kwargs)
    transformation = TransformationClient(
        settings.transformation_url_template,
        settings.routes,
        config,
        **client_kwargs,
    )
    assembler = PayloadAssembler(adapter, callback_url=settings.callback_url)
    return TransformationRelay(adapter, transformation, assembler)


def get_relay() -> TransformationRelay:
    """
    Get the transformation relay.

    Creates clients on first call.
    """
    global _relay
    if _relay is None:
        settings = get_settings()
        _relay = create_relay(settings)
        logger.info(
            f"[relay] Initialized with functions={sorted(settings.routes)} "
            f"callback={settings.callback_url}"
        )
    return _relay


async def initialize_services() -> None:
    """
    Initialize all services on application startup.

    Called from FastAPI lifespan.
    """
    get_relay()


async def shutdown_services() -> None:
    """
    Cleanup all services on application shutdown.

    Called from FastAPI lifespan.
    """
    global _relay
    if _relay:
        await _relay.close()
        _relay = None
