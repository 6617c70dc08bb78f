"""
Selector: weighted-random choice over the scored pool with an ordered fallback chain.

Pools are tried in order (post-diversity, pre-diversity, raw fetch) until one is
non-empty. Strategies are then tried in order, each returning a candidate or None:

1. weighted_random: cumulative-weight draw; None when total weight <= 0 or the
   drawn candidate has no content.
2. uniform_random: only when total weight <= 0.
3. highest_score: best usable candidate, bypassing the draw.

If every strategy returns None the caller reports NoContentAvailable. Nothing here
raises on degenerate input.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..models.scoring import ScoredCandidate

logger = logging.getLogger(__name__)

Pool = Sequence[Optional[ScoredCandidate]]
PoolSource = Tuple[str, Callable[[], Pool]]
Strategy = Callable[[Pool, np.random.Generator], Optional[ScoredCandidate]]


@dataclass
class Selection:
    candidate: Optional[ScoredCandidate]
    strategy: Optional[str]
    pool: List[Optional[ScoredCandidate]]
    fallbacks: List[str] = field(default_factory=list)

    @property
    def rank(self) -> int:
        """1-based position of the chosen candidate by score, 0 when nothing was chosen."""
        if self.candidate is None:
            return 0
        ordered = sorted((c for c in self.pool if c is not None), key=lambda c: _weight(c), reverse=True)
        for position, candidate in enumerate(ordered, start=1):
            if candidate is self.candidate:
                return position
        return 0


def _usable(candidate: Optional[ScoredCandidate]) -> bool:
    return candidate is not None and candidate.content is not None


def _weight(candidate: Optional[ScoredCandidate]) -> float:
    if candidate is None:
        return 0.0
    score = candidate.score
    if score is None or not math.isfinite(score) or score <= 0:
        return 0.0
    return float(score)


def total_weight(pool: Pool) -> float:
    return float(sum(_weight(c) for c in pool))


def weighted_random(pool: Pool, rng: np.random.Generator) -> Optional[ScoredCandidate]:
    """Draw u in [0, total) and take the first candidate whose cumulative weight exceeds it."""
    if not pool:
        return None
    weights = np.array([_weight(c) for c in pool], dtype=float)
    total = float(weights.sum())
    if total <= 0:
        logger.warning("[fallback] DEGENERATE_SCORES total_weight=%.4f pool=%d", total, len(pool))
        return None
    draw = rng.uniform(0.0, total)
    index = int(np.searchsorted(np.cumsum(weights), draw, side="right"))
    chosen = pool[min(index, len(pool) - 1)]
    if not _usable(chosen):
        logger.warning("[fallback] SELECTED_CANDIDATE_UNUSABLE index=%d", index)
        return None
    return chosen


def uniform_random(pool: Pool, rng: np.random.Generator) -> Optional[ScoredCandidate]:
    """Uniform choice, used only when no candidate carries positive weight."""
    if not pool or total_weight(pool) > 0:
        return None
    chosen = pool[int(rng.integers(len(pool)))]
    if not _usable(chosen):
        logger.warning("[fallback] UNIFORM_CANDIDATE_UNUSABLE")
        return None
    return chosen


def highest_score(pool: Pool, rng: np.random.Generator) -> Optional[ScoredCandidate]:
    """Best usable candidate by score; the draw is bypassed."""
    usable = [c for c in pool if _usable(c)]
    if not usable:
        return None

    def _key(c: ScoredCandidate) -> float:
        return c.score if c.score is not None and math.isfinite(c.score) else float("-inf")

    return max(usable, key=_key)


SELECTION_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("weighted_random", weighted_random),
    ("uniform_random", uniform_random),
    ("highest_score", highest_score),
)


def resolve_pool(pool_sources: Sequence[PoolSource]) -> Tuple[List[Optional[ScoredCandidate]], List[str]]:
    """First non-empty pool, plus the names of fallback pools used to get there."""
    fallbacks: List[str] = []
    for position, (name, load) in enumerate(pool_sources):
        pool = list(load() or [])
        if pool:
            if position > 0:
                fallbacks.append(name)
            return pool, fallbacks
        if position + 1 < len(pool_sources):
            next_name = pool_sources[position + 1][0]
            logger.warning("[fallback] POOL_EMPTY %s -> %s", name, next_name)
    return [], fallbacks


def select_candidate(
    pool_sources: Sequence[PoolSource],
    rng: np.random.Generator,
    strategies: Sequence[Tuple[str, Strategy]] = SELECTION_STRATEGIES,
) -> Selection:
    """
    Pick exactly one candidate, or none when the pools hold nothing usable.

    Args:
        pool_sources: (name, loader) pairs, tried in order until one yields candidates.
            Loaders are called lazily so fallback pools are only scored when needed.
        rng: per-request generator.
        strategies: (name, strategy) pairs, tried in order.
    """
    pool, fallbacks = resolve_pool(pool_sources)
    for position, (name, strategy) in enumerate(strategies):
        chosen = strategy(pool, rng)
        if chosen is not None:
            if position > 0:
                fallbacks.append(name)
            return Selection(candidate=chosen, strategy=name, pool=pool, fallbacks=fallbacks)
    fallbacks.append("no_content")
    logger.info("[fallback] NO_CONTENT_AVAILABLE pool=%d", len(pool))
    return Selection(candidate=None, strategy=None, pool=pool, fallbacks=fallbacks)
