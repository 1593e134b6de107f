"""
Decorator that injects an authenticated Google API client into a tool.

The decorated coroutine takes the client as its first parameter, ``service``. The
wrapper obtains it from the configured GoogleServiceFactory and hides the parameter
from the signature the MCP server publishes, so agents never see it.
"""

import asyncio
import functools
import inspect
import logging

from auth.google_auth import get_service_factory
from auth.scopes import get_scopes_for_group

logger = logging.getLogger(__name__)

SERVICE_CONFIGS = {
    "docs": {"service": "docs", "version": "v1"},
}


def require_google_service(service_type: str, scope_group: str):
    """
    Inject the Google API client for service_type as the ``service`` argument.

    Args:
        service_type: Key into SERVICE_CONFIGS (e.g., "docs")
        scope_group: Scope group the tool needs (e.g., "docs_write")
    """
    if service_type not in SERVICE_CONFIGS:
        raise ValueError(f"Unknown service type: {service_type}")
    config = SERVICE_CONFIGS[service_type]
    # Fail at import time on a misspelled scope group
    get_scopes_for_group(scope_group)

    def decorator(func):
        original_sig = inspect.signature(func)
        params = list(original_sig.parameters.values())
        if not params or params[0].name != "service":
            raise TypeError(
                f"{func.__name__} must take 'service' as its first parameter"
            )
        wrapper_sig = original_sig.replace(parameters=params[1:])

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            factory = get_service_factory()
            service = await asyncio.to_thread(
                factory.get_service, config["service"], config["version"]
            )
            return await func(service, *args, **kwargs)

        wrapper.__signature__ = wrapper_sig
        wrapper.__annotations__ = {
            k: v for k, v in getattr(func, "__annotations__", {}).items() if k != "service"
        }
        return wrapper

    return decorator
