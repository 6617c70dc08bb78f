"""Data models for the discovery selection engine."""

from .config import (
    DEFAULT_CONFIG,
    DiscoveryConfig,
    TrendingWindow,
    TrendingWindowConfig,
    resolve_config,
)
from .content import UNKNOWN_DOMAIN, ContentItem, domain_from_url, ensure_items
from .preferences import UserPreferences, clamp_wildness
from .scoring import ScoreBreakdown, ScoredCandidate, age_hours, unscored
from .selection import NoContentAvailable, SelectionOutcome, SelectionResult

__all__ = [
    "DEFAULT_CONFIG",
    "ContentItem",
    "DiscoveryConfig",
    "NoContentAvailable",
    "ScoreBreakdown",
    "ScoredCandidate",
    "SelectionOutcome",
    "SelectionResult",
    "TrendingWindow",
    "TrendingWindowConfig",
    "UNKNOWN_DOMAIN",
    "UserPreferences",
    "age_hours",
    "clamp_wildness",
    "domain_from_url",
    "ensure_items",
    "resolve_config",
    "unscored",
]
