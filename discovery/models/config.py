"""
Engine configuration — candidate pool, diversity, scoring, and exploration parameters.

DiscoveryConfig defaults are defined here. The server may pass a dict
(e.g. from a JSON file named by DISCOVERY_CONFIG_PATH); from_dict() merges it with these defaults.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator


class TrendingWindow(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


class TrendingWindowConfig(BaseModel):
    """Decay parameters for one trending window."""

    half_life_hours: float = Field(gt=0)
    # Items older than this contribute nothing to the trending term for the window.
    max_age_hours: float = Field(gt=0)


def _default_trending_windows() -> Dict[TrendingWindow, TrendingWindowConfig]:
    return {
        TrendingWindow.HOUR: TrendingWindowConfig(half_life_hours=2, max_age_hours=24),
        TrendingWindow.DAY: TrendingWindowConfig(half_life_hours=24, max_age_hours=72),
        TrendingWindow.WEEK: TrendingWindowConfig(half_life_hours=72, max_age_hours=336),
    }


class DiscoveryConfig(BaseModel):
    """Configuration for the discovery selection engine."""

    # -------------------------------------------------------------------------
    # Candidate Fetcher
    # -------------------------------------------------------------------------

    # Max number of candidates kept after topic pre-sort and domain capping.
    candidate_pool_size: int = Field(default=300, gt=0)

    # Size of the superset requested from storage before diversity capping.
    superset_fetch_limit: int = Field(default=500, gt=0)

    # Hard ceiling on the superset request, even when many exclusions overflow
    # the query-level ceiling and the limit is widened to compensate.
    max_superset_fetch_limit: int = Field(default=1000, gt=0)

    # Most-recent N exclusion ids sent to storage with the candidate query.
    # Older exclusions are still enforced in-process after the fetch.
    max_query_exclusions: int = Field(default=200, ge=0)

    # Length of the time bucket used for the session seed and the rotating sort key.
    session_window_minutes: int = Field(default=60, gt=0)

    # -------------------------------------------------------------------------
    # Domain Diversity Filter
    # -------------------------------------------------------------------------

    # No more than this many items per source domain in the candidate pool.
    max_per_domain: int = Field(default=20, gt=0)

    # When capping leaves fewer candidates than this, the cap is doubled until
    # the pool is large enough or no domain has anything left to contribute.
    min_viable_pool_size: int = Field(default=50, ge=0)

    # Relaxation only applies when the candidates span at most this many domains.
    # With more domains available the cap is a hard limit, even for a small pool.
    relax_max_domains: int = Field(default=1, ge=0)

    # -------------------------------------------------------------------------
    # Composite Score Weights (must sum to 1.0)
    # base = weight_quality * quality + weight_freshness * freshness + weight_trending * trending
    # relevance = base * topic_match * reputation_multiplier
    # -------------------------------------------------------------------------

    weight_quality: float = Field(default=0.50, ge=0)
    weight_freshness: float = Field(default=0.25, ge=0)
    weight_trending: float = Field(default=0.25, ge=0)

    # Used when an item has no stored quality score.
    default_quality: float = Field(default=0.5, ge=0, le=1)

    # -------------------------------------------------------------------------
    # Topic Match
    # matches > 0: 1 + topic_boost_per_match * matches (capped at topic_boost_cap)
    # matches == 0: mismatch penalty, relaxed toward 1.0 as wildness grows
    # -------------------------------------------------------------------------

    topic_boost_per_match: float = Field(default=0.5, gt=0)
    # None leaves the boost uncapped (compounds with every extra match).
    topic_boost_cap: Optional[float] = Field(default=3.0)
    topic_mismatch_penalty: float = Field(default=0.8, ge=0, le=1)

    # -------------------------------------------------------------------------
    # Freshness / Trending
    # freshness = 0.5 ** (age_days / freshness_half_life_days)
    # trending = trending_score * 0.5 ** (age_hours / window.half_life_hours)
    # -------------------------------------------------------------------------

    freshness_half_life_days: float = Field(default=14.0, gt=0)
    trending_window: TrendingWindow = TrendingWindow.WEEK
    trending_windows: Dict[TrendingWindow, TrendingWindowConfig] = Field(
        default_factory=_default_trending_windows
    )

    # -------------------------------------------------------------------------
    # Domain Reputation
    # multiplier = reputation_floor + (1 - reputation_floor) * reputation
    # -------------------------------------------------------------------------

    default_domain_reputation: float = Field(default=0.7, ge=0, le=1)
    reputation_floor: float = Field(default=0.5, ge=0, le=1)

    # -------------------------------------------------------------------------
    # Exploration
    # r = base_randomness + wildness_randomness * wildness / 100
    # score = (1 - r) * relevance + r * u * max_relevance
    # -------------------------------------------------------------------------

    base_randomness: float = Field(default=0.3, ge=0, le=1)
    wildness_randomness: float = Field(default=0.5, ge=0, le=1)

    # Rationale: wildness above this reads as an exploration pick.
    high_wildness_threshold: int = Field(default=70, ge=0, le=100)

    algorithm_version: str = "v2.1"

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = self.weight_quality + self.weight_freshness + self.weight_trending
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def fetch_limits_ordered(self):
        if self.max_superset_fetch_limit < self.superset_fetch_limit:
            raise ValueError(
                f"max_superset_fetch_limit ({self.max_superset_fetch_limit}) must be >= "
                f"superset_fetch_limit ({self.superset_fetch_limit})"
            )
        return self

    @model_validator(mode="after")
    def randomness_within_unit(self):
        if self.base_randomness + self.wildness_randomness > 1.0:
            raise ValueError(
                "base_randomness + wildness_randomness must not exceed 1.0, got "
                f"{self.base_randomness + self.wildness_randomness}"
            )
        return self

    @model_validator(mode="after")
    def topic_cap_allows_boost(self):
        # One match must always boost, and two must always beat one.
        if self.topic_boost_cap is not None:
            two_matches = 1.0 + 2 * self.topic_boost_per_match
            if self.topic_boost_cap < two_matches:
                raise ValueError(
                    f"topic_boost_cap must be at least {two_matches} "
                    f"(two matches at {self.topic_boost_per_match} per match), got {self.topic_boost_cap}"
                )
        return self

    @model_validator(mode="after")
    def trending_window_configured(self):
        if self.trending_window not in self.trending_windows:
            raise ValueError(f"No decay settings for trending window '{self.trending_window.value}'")
        return self

    @property
    def active_trending_window(self) -> TrendingWindowConfig:
        return self.trending_windows[self.trending_window]

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "DiscoveryConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        for section in ("candidate_pool", "diversity", "scoring", "exploration"):
            if section in config_dict:
                flat.update(config_dict[section])
        if "topic_match" in config_dict:
            tm = config_dict["topic_match"]
            if "boost_per_match" in tm:
                flat["topic_boost_per_match"] = tm["boost_per_match"]
            if "boost_cap" in tm:
                flat["topic_boost_cap"] = tm["boost_cap"]
            if "mismatch_penalty" in tm:
                flat["topic_mismatch_penalty"] = tm["mismatch_penalty"]
        if "trending" in config_dict:
            tr = config_dict["trending"]
            if "window" in tr:
                flat["trending_window"] = tr["window"]
            if "windows" in tr:
                windows = _default_trending_windows()
                for name, values in tr["windows"].items():
                    windows[TrendingWindow(name)] = TrendingWindowConfig.model_validate(values)
                flat["trending_windows"] = windows
        # Top-level keys override sectioned ones.
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = DiscoveryConfig()


def resolve_config(config: Optional["DiscoveryConfig"]) -> "DiscoveryConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
