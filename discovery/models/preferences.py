"""
Preference snapshot: read-only projection of a user's personalization state at request time.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

MIN_WILDNESS = 0
MAX_WILDNESS = 100


def clamp_wildness(wildness: int) -> int:
    return max(MIN_WILDNESS, min(MAX_WILDNESS, int(wildness)))


class UserPreferences(BaseModel):
    """
    user_id: caller identity (skip history is keyed by it).
    preferred_topics: topic names used for the topic-match term and the pre-sort.
    wildness: 0-100 exploration setting; values outside the range are clamped.
    blocked_domains: domains that never enter the candidate pool.
    """

    user_id: str
    preferred_topics: List[str] = Field(default_factory=list)
    wildness: int = 35
    blocked_domains: List[str] = Field(default_factory=list)

    @field_validator("wildness", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_wildness(value)

    @field_validator("blocked_domains", mode="after")
    @classmethod
    def _normalize_domains(cls, value: List[str]) -> List[str]:
        return [d.lower().removeprefix("www.") for d in value if d]

    @property
    def wildness_fraction(self) -> float:
        return self.wildness / MAX_WILDNESS
