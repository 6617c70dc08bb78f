"""
Topic-match multiplier: boost per matching preferred topic, penalty for a mismatch.

The boost compounds with every match to reward precise topical fits; topic_boost_cap
keeps many-topic items from dominating the pool (None disables the cap).
"""

from ...models.config import DiscoveryConfig


def topic_match_multiplier(
    match_count: int,
    has_preferences: bool,
    wildness_fraction: float,
    config: DiscoveryConfig,
) -> float:
    """
    Multiplier for the topic term.

    No preferred topics: neutral 1.0 (nothing to match against).
    match_count > 0: 1 + topic_boost_per_match * match_count, capped at topic_boost_cap.
    match_count == 0: topic_mismatch_penalty, moved toward 1.0 as wildness grows.
    """
    if not has_preferences:
        return 1.0
    if match_count > 0:
        boost = 1.0 + config.topic_boost_per_match * match_count
        if config.topic_boost_cap is not None:
            boost = min(boost, config.topic_boost_cap)
        return boost
    penalty = config.topic_mismatch_penalty
    return penalty + (1.0 - penalty) * wildness_fraction
