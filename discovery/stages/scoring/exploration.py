"""
Exploration term: random jitter whose share of the score grows with wildness.

Even at wildness 0 the base randomness keeps selections varied; at high wildness the
score landscape flattens toward a uniform draw.
"""

import numpy as np

from ...models.config import DiscoveryConfig


def randomness_magnitude(wildness_fraction: float, config: DiscoveryConfig) -> float:
    """r = base_randomness + wildness_randomness * wildness / 100."""
    return config.base_randomness + config.wildness_randomness * wildness_fraction


def explore(
    relevance: float,
    scale: float,
    magnitude: float,
    rng: np.random.Generator,
) -> tuple[float, float]:
    """
    Blend relevance with a uniform draw scaled to the pool's best relevance.

    Returns (final_score, randomness_term).
    """
    jitter = magnitude * float(rng.random()) * scale
    return (1.0 - magnitude) * relevance + jitter, jitter
