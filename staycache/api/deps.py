"""
API dependency injection.

Sandi Metz Principles:
- Single Responsibility: Dependency lookup and injection
- Dependency Inversion: Routes receive collaborators, never build them
"""

from fastapi import Request

from staycache.cache.coordinator import CacheCoordinator
from staycache.fetch.client import ResilientFetchClient
from staycache.services.hotel_caches import CacheRegistry


def get_app_state(request: Request):
    """
    Get the application state wired at startup.

    Args:
        request: FastAPI request

    Returns:
        ApplicationState instance
    """
    return request.app.state.app_state

def get_coordinator(request: Request) -> CacheCoordinator:
    """Get the cache coordinator."""
    return get_app_state(request).coordinator

def get_cache_registry(request: Request) -> CacheRegistry:
    """Get the namespaced cache registry."""
    return get_app_state(request).cache_registry

def get_fetch_client(request: Request) -> ResilientFetchClient:
    """Get the provider fetch client."""
    return get_app_state(request).fetch_client
