"""Catalog — SafeguardCatalog and its TTLCache."""

from safeguard_mapper.catalog.safeguard_catalog import (
    SAFEGUARD_ID_PATTERN,
    SafeguardCatalog,
    load_safeguard_definitions,
    safeguard_sort_key,
)
from safeguard_mapper.catalog.ttl_cache import CacheEntry, CacheStats, TTLCache

__all__ = [
    "SAFEGUARD_ID_PATTERN",
    "SafeguardCatalog",
    "load_safeguard_definitions",
    "safeguard_sort_key",
    "CacheEntry",
    "CacheStats",
    "TTLCache",
]
