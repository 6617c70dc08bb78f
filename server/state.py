"""Application state: server config, engine config, and the discovery store."""

import logging
from typing import Optional

from discovery.models.config import DiscoveryConfig
from discovery.store import DiscoveryStore

from .config import ServerConfig, get_config
from .services import InMemoryDiscoveryStore, SupabaseDiscoveryStore, load_engine_config

logger = logging.getLogger(__name__)


class AppState:
    """Global application state."""

    def __init__(
        self,
        config: ServerConfig,
        store: Optional[DiscoveryStore] = None,
        engine_config: Optional[DiscoveryConfig] = None,
    ):
        self.config = config
        # Invalid engine config fails here, before the server accepts requests.
        self.engine_config = (
            engine_config if engine_config is not None
            else load_engine_config(config.discovery_config_path)
        )
        self.store = store if store is not None else self._create_store(config)
        logger.info("[startup] Discovery store: %s", type(self.store).__name__)

    def _create_store(self, config: ServerConfig) -> DiscoveryStore:
        """Create the store for config.data_source (Supabase, JSON catalog, or empty in-memory)."""
        if config.data_source == "supabase" and config.supabase_url and config.supabase_service_key:
            return SupabaseDiscoveryStore.from_credentials(
                config.supabase_url, config.supabase_service_key
            )
        if config.data_source == "json" and config.content_json_path:
            return InMemoryDiscoveryStore.from_json_file(config.content_json_path)
        if config.data_source != "memory":
            logger.warning(
                "[startup] DATA_SOURCE=%s is missing settings, using an empty in-memory store",
                config.data_source,
            )
        return InMemoryDiscoveryStore()


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState(get_config())
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Replace the global state (tests install a state with their own store)."""
    global _state
    _state = state
