"""
Scoring model: ScoredCandidate and time helpers used by the pipeline.

Contains:
- ScoreBreakdown: the individual terms behind a composite score
- ScoredCandidate: a content item with its score and breakdown
- age_hours: item age used by the freshness and trending terms
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .content import ContentItem

# Age assigned to items with a missing or unparseable timestamp.
UNKNOWN_AGE_HOURS = 999 * 24.0


def parse_timestamp(date_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are treated as UTC."""
    if not date_str:
        return None
    try:
        dt = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def age_hours(date_str: Optional[str], now: Optional[datetime] = None) -> float:
    """Hours since a given ISO date string (never negative)."""
    dt = parse_timestamp(date_str)
    if dt is None:
        return UNKNOWN_AGE_HOURS
    now = now or datetime.now(timezone.utc)
    return max(0.0, (now - dt).total_seconds() / 3600.0)


class ScoreBreakdown(BaseModel):
    """Individual score terms, kept for rationale generation and debugging."""

    quality: float = 0.0
    topic_match: float = 1.0
    freshness: float = 0.0
    trending: float = 0.0
    reputation: float = 0.0
    randomness: float = 0.0


class ScoredCandidate(BaseModel):
    """A content item with its composite score. content is None only for malformed rows."""

    content: Optional[ContentItem] = None
    score: float = 0.0
    relevance: float = 0.0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    matched_topics: List[str] = Field(default_factory=list)
    # Each term's share of the final score, in score units (quality, topic_match,
    # freshness, trending, randomness).
    contributions: Dict[str, float] = Field(default_factory=dict)

    @property
    def is_usable(self) -> bool:
        return self.content is not None

    @property
    def dominant_term(self) -> Optional[str]:
        """Name of the largest positive contribution, or None when nothing contributed."""
        positive = {k: v for k, v in self.contributions.items() if v > 0}
        if not positive:
            return None
        return max(positive, key=positive.get)


def unscored(items: List[ContentItem]) -> List[ScoredCandidate]:
    """Wrap raw items as zero-score candidates (last-resort pool)."""
    return [ScoredCandidate(content=item) for item in items]
