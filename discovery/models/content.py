"""
Content model: typed representation of a discoverable item for the selection pipeline.

Used by the candidate pool, diversity filter, scoring, and selection stages instead of raw rows.
Built from storage rows via ContentItem.model_validate(d).
"""

import math
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

UNKNOWN_DOMAIN = "unknown"


def domain_from_url(url: Optional[str]) -> str:
    """Lower-cased host of a URL without a leading www., or UNKNOWN_DOMAIN."""
    if not url:
        return UNKNOWN_DOMAIN
    parsed = urlparse(url if "//" in url else f"//{url}")
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host or UNKNOWN_DOMAIN


def _as_float(value: Any) -> Optional[float]:
    """float(value), or None when the value is missing or unreadable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class ContentItem(BaseModel):
    """
    Content payload used across the engine stages.

    All fields except id are optional to support partial rows from storage.
    The engine reads items and never mutates them.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    url: str = ""
    title: str = ""
    description: Optional[str] = ""
    domain: str = ""
    topics: List[str] = []
    quality_score: Optional[float] = None
    trending_score: Optional[float] = None
    base_score: Optional[float] = None
    popularity_score: Optional[float] = None
    created_at: Optional[str] = None
    image_url: Optional[str] = None
    reading_time_minutes: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("url", "title", "domain", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("topics", mode="before")
    @classmethod
    def _topics_never_none(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set)):
            return []
        return [str(t) for t in value if t]

    @field_validator(
        "quality_score", "trending_score", "base_score", "popularity_score", mode="before"
    )
    @classmethod
    def _lenient_float(cls, value: Any) -> Optional[float]:
        return _as_float(value)

    @field_validator("reading_time_minutes", mode="before")
    @classmethod
    def _lenient_minutes(cls, value: Any) -> Optional[int]:
        minutes = _as_float(value)
        if minutes is None or not math.isfinite(minutes):
            return None
        return int(round(minutes))

    @model_validator(mode="after")
    def _derive_domain(self):
        if not self.domain:
            self.domain = domain_from_url(self.url)
        else:
            self.domain = self.domain.lower().removeprefix("www.")
        return self

    def matching_topics(self, preferred_topics: List[str]) -> List[str]:
        """Topics of this item that appear in preferred_topics, in item order."""
        if not preferred_topics:
            return []
        preferred = set(preferred_topics)
        return [t for t in self.topics if t in preferred]


def ensure_items(items: List[Union[Dict[str, Any], "ContentItem"]]) -> List["ContentItem"]:
    """Convert list of dicts or ContentItems to list of ContentItem models for use in the pipeline."""
    return [
        ContentItem.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
