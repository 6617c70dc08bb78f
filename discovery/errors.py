"""Exceptions raised at the engine's boundaries."""

import asyncio


class DiscoveryError(Exception):
    """Base class for discovery engine errors."""


class StorageError(DiscoveryError):
    """A storage read or write failed or timed out. Recovered with partial data where possible."""


class ConfigError(DiscoveryError):
    """Engine configuration could not be loaded."""


# Storage failures the engine recovers from locally.
TRANSIENT_STORAGE_ERRORS = (StorageError, asyncio.TimeoutError, TimeoutError, OSError)
