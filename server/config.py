"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Single .env at the project root
root_env = Path(__file__).resolve().parent.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)

DATA_SOURCES = ("memory", "json", "supabase")


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Deadline for one selection request; overruns return 504
    request_timeout_seconds: float = 10.0

    # Engine tuning JSON (sections: candidate_pool, diversity, scoring, ...); defaults when unset
    discovery_config_path: Optional[Path] = None

    # Data source: "memory" (empty catalog) | "json" (catalog file) | "supabase"
    data_source: str = "memory"
    # When data_source=json: path to a JSON list of content rows
    content_json_path: Optional[Path] = None
    # When data_source=supabase: project URL and service key
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = Path(__file__).parent.parent
        data_source = os.getenv("DATA_SOURCE", "").strip().lower() or "memory"
        if data_source not in DATA_SOURCES:
            data_source = "memory"

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (base_dir / p).resolve()

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10")),
            discovery_config_path=_path_env("DISCOVERY_CONFIG_PATH"),
            data_source=data_source,
            content_json_path=_path_env("CONTENT_JSON_PATH"),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY") or None,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if self.data_source == "json":
            if not self.content_json_path:
                errors.append("DATA_SOURCE=json requires CONTENT_JSON_PATH")
            elif not self.content_json_path.exists():
                errors.append(f"Content JSON not found: {self.content_json_path}")

        if self.data_source == "supabase":
            if not self.supabase_url or not self.supabase_service_key:
                errors.append("DATA_SOURCE=supabase requires SUPABASE_URL and SUPABASE_SERVICE_KEY")

        if self.discovery_config_path and not self.discovery_config_path.exists():
            errors.append(f"Discovery config not found: {self.discovery_config_path}")

        if self.request_timeout_seconds <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be positive")

        return len(errors) == 0, errors


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
