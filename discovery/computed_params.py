"""
Computed Parameters for the discovery engine

This module computes derived parameters from the base configuration.
Computed parameters are read-only and are exposed next to the active config
so tuning changes can be checked at a glance.
"""

import math
from typing import Any, Dict, Optional

from .models.config import DiscoveryConfig, resolve_config
from .models.preferences import MAX_WILDNESS, clamp_wildness


def compute_parameters(
    config: Optional[DiscoveryConfig] = None,
    wildness: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Compute derived parameter values from a DiscoveryConfig.

    Args:
        config: Engine configuration (DEFAULT_CONFIG when None)
        wildness: Optional wildness setting; adds the values in effect at that setting

    Returns:
        Dictionary of computed parameter values
    """
    config = resolve_config(config)
    computed: Dict[str, Any] = {}

    # =========================================================================
    # Normalized Scoring Weights
    # =========================================================================
    weight_total = config.weight_quality + config.weight_freshness + config.weight_trending
    if weight_total > 0:
        computed["normalized_weight_quality"] = config.weight_quality / weight_total
        computed["normalized_weight_freshness"] = config.weight_freshness / weight_total
        computed["normalized_weight_trending"] = config.weight_trending / weight_total
    else:
        computed["normalized_weight_quality"] = 0.34
        computed["normalized_weight_freshness"] = 0.33
        computed["normalized_weight_trending"] = 0.33

    # =========================================================================
    # Exploration Range (randomness share of the score)
    # =========================================================================
    computed["min_randomness"] = config.base_randomness
    computed["max_randomness"] = config.base_randomness + config.wildness_randomness

    # =========================================================================
    # Topic Match Multiplier Range
    # =========================================================================
    computed["min_mismatch_multiplier"] = config.topic_mismatch_penalty
    computed["max_mismatch_multiplier"] = 1.0
    if config.topic_boost_cap is not None:
        computed["max_topic_boost"] = config.topic_boost_cap
        computed["matches_until_cap"] = math.ceil(
            (config.topic_boost_cap - 1.0) / config.topic_boost_per_match
        )
    else:
        computed["max_topic_boost"] = None
        computed["matches_until_cap"] = None

    # =========================================================================
    # Reputation Multiplier Range
    # =========================================================================
    computed["min_reputation_multiplier"] = config.reputation_floor
    computed["default_reputation_multiplier"] = (
        config.reputation_floor + (1.0 - config.reputation_floor) * config.default_domain_reputation
    )

    # =========================================================================
    # Decay Constants (lambda = ln(2) / half-life)
    # =========================================================================
    computed["freshness_lambda_per_day"] = math.log(2) / config.freshness_half_life_days
    computed["trending_window"] = config.trending_window.value
    computed["trending_lambda_per_hour"] = {
        window.value: math.log(2) / settings.half_life_hours
        for window, settings in config.trending_windows.items()
    }
    computed["trending_max_age_hours"] = config.active_trending_window.max_age_hours

    # =========================================================================
    # Values at a specific wildness
    # =========================================================================
    if wildness is not None:
        fraction = clamp_wildness(wildness) / MAX_WILDNESS
        computed["wildness"] = clamp_wildness(wildness)
        computed["randomness"] = config.base_randomness + config.wildness_randomness * fraction
        penalty = config.topic_mismatch_penalty
        computed["mismatch_multiplier"] = penalty + (1.0 - penalty) * fraction
        computed["exploration_pick"] = computed["wildness"] > config.high_wildness_threshold

    return computed
