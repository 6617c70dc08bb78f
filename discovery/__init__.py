"""
Discovery Selection Engine

Picks one next item per request from a large content catalog:
- models/: DiscoveryConfig, ContentItem, ScoredCandidate, SelectionResult
- stages/: candidate pool, domain diversity, scoring, selector, orchestrator
- store: DiscoveryStore protocol implemented by the server's storage backends
"""

from .computed_params import compute_parameters
from .errors import ConfigError, DiscoveryError, StorageError
from .models.config import DEFAULT_CONFIG, DiscoveryConfig, TrendingWindow, resolve_config
from .models.content import ContentItem
from .models.preferences import UserPreferences
from .models.scoring import ScoreBreakdown, ScoredCandidate
from .models.selection import NoContentAvailable, SelectionOutcome, SelectionResult
from .stages.orchestrator import select_next
from .store import CandidateOrder, DiscoveryStore
from .utils.seeds import session_seed, session_window

__all__ = [
    "CandidateOrder",
    "ConfigError",
    "ContentItem",
    "DEFAULT_CONFIG",
    "DiscoveryConfig",
    "DiscoveryError",
    "DiscoveryStore",
    "NoContentAvailable",
    "ScoreBreakdown",
    "ScoredCandidate",
    "SelectionOutcome",
    "SelectionResult",
    "StorageError",
    "TrendingWindow",
    "UserPreferences",
    "compute_parameters",
    "resolve_config",
    "select_next",
    "session_seed",
    "session_window",
]
