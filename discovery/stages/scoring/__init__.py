"""
Scoring: blend quality, freshness, trending, topic match, reputation, and exploration.

Public API: score_candidates, score_relevance, build_rationale.
- core: main orchestration (score_candidates).
- Submodules: topic_match, freshness, exploration, rationale.
"""

from .core import reputation_multiplier, score_candidates, score_relevance
from .rationale import build_rationale

__all__ = [
    "build_rationale",
    "reputation_multiplier",
    "score_candidates",
    "score_relevance",
]
