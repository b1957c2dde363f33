"""
API Routes module.

Contains all operator endpoint routers.
"""

from staycache.api.routes import cache, health, provider

__all__ = ["health", "cache", "provider"]
