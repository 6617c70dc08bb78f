"""
Selection model: the engine's response values.

SelectionResult is returned when an item was chosen; NoContentAvailable is the
terminal empty outcome (every eligible item excluded). Neither has an identity
beyond the response.
"""

from typing import List, Union

from pydantic import BaseModel, Field

from .content import ContentItem
from .scoring import ScoreBreakdown


class SelectionResult(BaseModel):
    content: ContentItem
    rationale: str
    score: float
    score_breakdown: ScoreBreakdown
    # Session exclusion echo: the caller's seen ids plus the chosen id.
    seen_ids: List[str] = Field(default_factory=list)
    pool_size: int = 0
    # Effective per-domain cap (larger than configured when relaxed).
    domain_cap: int = 0
    domain_cap_relaxed: bool = False
    # Fallback steps triggered while selecting, in order.
    fallbacks: List[str] = Field(default_factory=list)
    strategy: str = ""
    # 1-based position of the chosen item in the scored pool.
    rank: int = 0


class NoContentAvailable(BaseModel):
    reason: str = "No more content matching your filters"
    seen_ids: List[str] = Field(default_factory=list)
    fallbacks: List[str] = Field(default_factory=list)


SelectionOutcome = Union[SelectionResult, NoContentAvailable]
