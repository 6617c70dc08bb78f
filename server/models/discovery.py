"""Discovery request/response Pydantic models."""

from typing import List, Optional

from pydantic import BaseModel

from discovery.models.content import ContentItem
from discovery.models.scoring import ScoreBreakdown


class NextRequest(BaseModel):
    user_id: str
    wildness: int = 35
    seen_ids: List[str] = []
    preferred_topics: List[str] = []
    blocked_domains: List[str] = []


class SkipRequest(BaseModel):
    user_id: str
    content_id: str


class SelectionDebugInfo(BaseModel):
    pool_size: int = 0
    domain_cap: int = 0
    domain_cap_relaxed: bool = False
    strategy: str = ""
    fallbacks: List[str] = []
    rank: int = 0
    algorithm_version: str = ""


class NextResponse(BaseModel):
    content: Optional[ContentItem] = None
    rationale: Optional[str] = None
    score: Optional[float] = None
    score_breakdown: Optional[ScoreBreakdown] = None
    seen_ids: List[str] = []
    exhausted: bool = False
    message: Optional[str] = None
    debug: SelectionDebugInfo | None = None


class SkipResponse(BaseModel):
    status: str = "skipped"
    user_id: str
    content_id: str
