"""
Discovery Store abstraction.

Supplies candidate content, skip history, and domain reputation to the engine,
and persists skips and selection events for the server. Implementations:
in-memory (tests, local JSON catalog), Supabase (production). Swap via config.
"""

from enum import Enum
from typing import Dict, List, Protocol, Sequence


class CandidateOrder(str, Enum):
    """Sort key for the candidate superset query."""

    RECENCY = "created_at"
    QUALITY = "quality_score"


class DiscoveryStore(Protocol):
    """Protocol for the storage collaborator. All reads are async so they can run concurrently."""

    async def fetch_candidates(
        self,
        exclude_ids: Sequence[str],
        preferred_topics: Sequence[str],
        limit: int,
        order_by: CandidateOrder = CandidateOrder.RECENCY,
    ) -> List[Dict]:
        """
        Return up to limit active content rows whose ids are not in exclude_ids,
        sorted by order_by (descending). preferred_topics is a hint only.
        """
        ...

    async def fetch_skipped_ids(self, user_id: str) -> List[str]:
        """Return every content id the user has skipped, newest first."""
        ...

    async def fetch_domain_reputations(self, domains: Sequence[str]) -> Dict[str, float]:
        """Return trust scores in [0, 1] for the known domains among domains, in one lookup."""
        ...

    async def record_skip(self, user_id: str, content_id: str) -> None:
        """Persist a permanent skip."""
        ...

    async def record_discovery_event(
        self,
        user_id: str,
        content_id: str,
        wildness: int,
        score: float,
        rank: int,
        algorithm_version: str,
    ) -> None:
        """Persist an analytics record of a selection."""
        ...
