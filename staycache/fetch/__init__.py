"""
Fetch module.

Rate-limited, failure-classifying client for the hotel search provider.
"""

from staycache.fetch.client import FetchClientConfig, ResilientFetchClient

__all__ = ["FetchClientConfig", "ResilientFetchClient"]
