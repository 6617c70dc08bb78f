"""Backing logic: storage backends and engine config loading."""

from .engine_config import load_engine_config
from .memory_store import InMemoryDiscoveryStore
from .supabase_store import SupabaseDiscoveryStore

__all__ = [
    "InMemoryDiscoveryStore",
    "SupabaseDiscoveryStore",
    "load_engine_config",
]
