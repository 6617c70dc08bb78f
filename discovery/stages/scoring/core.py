"""
Main scoring orchestration: per-candidate relevance, then pool-wide exploration.

relevance = (w_q * quality + w_f * freshness + w_t * trending) * topic_match * reputation_multiplier
score = (1 - r) * relevance + r * u * max_relevance

Missing optional fields (quality, timestamps, topics, domain reputation) take
neutral defaults; a candidate is never dropped or zeroed for lacking them.
Submodules used: topic_match, freshness, exploration.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional

import numpy as np

from ...models.config import DEFAULT_CONFIG, DiscoveryConfig
from ...models.content import ContentItem
from ...models.preferences import UserPreferences
from ...models.scoring import ScoreBreakdown, ScoredCandidate, age_hours

from .exploration import explore, randomness_magnitude
from .freshness import freshness_score, trending_score
from .topic_match import topic_match_multiplier

logger = logging.getLogger(__name__)


def _unit(value: Optional[float], default: float) -> float:
    """Clamp to [0, 1]; None and non-finite values take the default."""
    if value is None or not math.isfinite(value):
        return default
    return max(0.0, min(1.0, float(value)))


def reputation_multiplier(reputation: float, config: DiscoveryConfig) -> float:
    return config.reputation_floor + (1.0 - config.reputation_floor) * reputation


def score_relevance(
    item: ContentItem,
    preferences: UserPreferences,
    reputation: Optional[float],
    config: DiscoveryConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> ScoredCandidate:
    """Score one item without the exploration term (score == relevance)."""
    # Rows without a quality score fall back to the stored base score.
    quality = _unit(item.quality_score, _unit(item.base_score, config.default_quality))
    age = age_hours(item.created_at, now)
    freshness = freshness_score(age, config.freshness_half_life_days)
    trending = trending_score(item.trending_score, age, config.active_trending_window)
    matched = item.matching_topics(preferences.preferred_topics)
    topic = topic_match_multiplier(
        len(matched),
        bool(preferences.preferred_topics),
        preferences.wildness_fraction,
        config,
    )
    rep = _unit(reputation, config.default_domain_reputation)
    rep_mult = reputation_multiplier(rep, config)

    base = (
        config.weight_quality * quality
        + config.weight_freshness * freshness
        + config.weight_trending * trending
    )
    relevance = base * topic * rep_mult
    if not math.isfinite(relevance) or relevance < 0:
        relevance = 0.0

    return ScoredCandidate(
        content=item,
        score=relevance,
        relevance=relevance,
        breakdown=ScoreBreakdown(
            quality=quality,
            topic_match=topic,
            freshness=freshness,
            trending=trending,
            reputation=rep,
            randomness=0.0,
        ),
        matched_topics=matched,
        contributions={
            "quality": config.weight_quality * quality * rep_mult,
            "freshness": config.weight_freshness * freshness * rep_mult,
            "trending": config.weight_trending * trending * rep_mult,
            "topic_match": base * (topic - 1.0) * rep_mult if topic > 1.0 else 0.0,
        },
    )


def score_candidates(
    items: List[ContentItem],
    preferences: UserPreferences,
    reputations: Dict[str, float],
    rng: np.random.Generator,
    config: DiscoveryConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ScoredCandidate]:
    """
    Score every item and return candidates sorted by final score (desc).

    reputations maps domain -> trust in [0, 1]; absent domains use the neutral default.
    """
    now = now or datetime.now(timezone.utc)

    # 1) Relevance per candidate
    scored = [
        score_relevance(item, preferences, reputations.get(item.domain), config, now)
        for item in items
    ]

    # 2) Exploration: jitter scaled to the best relevance in this pool
    magnitude = randomness_magnitude(preferences.wildness_fraction, config)
    scale = max((c.relevance for c in scored), default=0.0)
    for candidate in scored:
        final, jitter = explore(candidate.relevance, scale, magnitude, rng)
        candidate.score = final if math.isfinite(final) else 0.0
        candidate.breakdown.randomness = jitter
        candidate.contributions = {
            name: value * (1.0 - magnitude) for name, value in candidate.contributions.items()
        }
        candidate.contributions["randomness"] = jitter

    # 3) Sort by final score
    scored.sort(key=lambda c: c.score, reverse=True)

    if scored:
        logger.debug(
            "[scoring] %d candidates r=%.2f top_score=%.4f max_relevance=%.4f",
            len(scored), magnitude, scored[0].score, scale,
        )
    return scored
