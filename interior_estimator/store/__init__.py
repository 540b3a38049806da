"""
Persistence - Estimate store interface, JSON directory store and catalog loading.
"""

from .estimate_store import (
    EstimateStore,
    JsonDirectoryStore,
    catalog_by_id,
    load_catalog,
    load_estimate,
    load_json,
)

__all__ = [
    "EstimateStore",
    "JsonDirectoryStore",
    "catalog_by_id",
    "load_catalog",
    "load_estimate",
    "load_json",
]
