"""
Cache key generation utilities.

Sandi Metz Principles:
- Single Responsibility: Key derivation
- Small functions: Each does one thing
- Pure functions: No side effects
"""

import hashlib
import json
from typing import Any, Mapping, Optional

from staycache.exceptions import MalformedInput

DEFAULT_KEY_VERSION = "2"
HASH_LENGTH = 16

_SCALARS = (str, int, float, bool, type(None))


def canonicalize_params(params: Mapping[str, Any]) -> str:
    """
    Serialize a flat parameter map into a canonical string.

    Args:
        params: Parameter name -> scalar value

    Returns:
        JSON text with sorted keys and compact separators

    Raises:
        MalformedInput: If a value is not a primitive scalar
    """
    for name, value in params.items():
        if not isinstance(name, str):
            raise MalformedInput(f"Parameter names must be strings, got {name!r}")
        if not isinstance(value, _SCALARS):
            raise MalformedInput(
                f"Parameter {name!r} must be a scalar, got {type(value).__name__}"
            )
    return json.dumps(params, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_params(params: Mapping[str, Any]) -> str:
    """
    Hash a parameter map to a short hex digest.

    Args:
        params: Parameter name -> scalar value

    Returns:
        First 16 hex characters of the SHA-256 digest
    """
    canonical = canonicalize_params(params)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def build_key(
    namespace: str,
    params: Optional[Mapping[str, Any]] = None,
    version: str = DEFAULT_KEY_VERSION,
) -> str:
    """
    Build a versioned cache key.

    Set-equal parameter maps produce the same key regardless of
    insertion order.

    Args:
        namespace: Key namespace (e.g. "hotel:search")
        params: Flat parameter map (empty map is allowed)
        version: Key schema version

    Returns:
        Cache key (namespace:v<version>:<hash>)
    """
    if not namespace:
        raise MalformedInput("Cache key namespace must not be empty")
    return f"{namespace}:v{version}:{hash_params(params or {})}"
