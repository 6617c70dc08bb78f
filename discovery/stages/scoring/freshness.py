"""
Time decay for the freshness and trending terms.

freshness: half-life decay on item age (days).
trending: stored trending score decayed with the active window's half-life,
zeroed once the item is older than the window's max age.
"""

import math
from typing import Optional

from ...models.config import TrendingWindowConfig


def half_life_decay(age: float, half_life: float) -> float:
    """0.5 ** (age / half_life); 1.0 at age 0, 0.5 at one half-life."""
    return 0.5 ** (max(0.0, age) / half_life)


def freshness_score(age_hours: float, half_life_days: float) -> float:
    return half_life_decay(age_hours / 24.0, half_life_days)


def trending_score(
    stored_score: Optional[float],
    age_hours: float,
    window: TrendingWindowConfig,
) -> float:
    """Windowed trending term in [0, 1]. Missing stored scores count as not trending."""
    if stored_score is None or not math.isfinite(stored_score) or stored_score <= 0:
        return 0.0
    if age_hours > window.max_age_hours:
        return 0.0
    return min(1.0, stored_score) * half_life_decay(age_hours, window.half_life_hours)
