"""
Supabase Discovery Store.

Reads candidates from the content table, skip history from user_interactions,
and trust scores from domain_reputation; writes skips and discovery_events.
The supabase client is synchronous, so every call runs in a worker thread.
Backend failures are raised as StorageError.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Sequence

from supabase import Client, create_client

from discovery.errors import StorageError
from discovery.store import CandidateOrder

logger = logging.getLogger(__name__)

CONTENT_TABLE = "content"
INTERACTIONS_TABLE = "user_interactions"
REPUTATION_TABLE = "domain_reputation"
EVENTS_TABLE = "discovery_events"

CONTENT_COLUMNS = (
    "id, url, title, description, image_url, domain, topics, reading_time_minutes, "
    "created_at, quality_score, trending_score, base_score, popularity_score"
)

SKIP_INTERACTION = "skip"


class SupabaseDiscoveryStore:
    """DiscoveryStore backed by Supabase (PostgREST)."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_credentials(cls, url: str, service_key: str) -> "SupabaseDiscoveryStore":
        return cls(create_client(url, service_key))

    async def _run(self, operation: str, fn: Callable[..., Any], *args) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"{operation} failed: {e}") from e

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _query_candidates(
        self,
        exclude_ids: List[str],
        limit: int,
        order_by: CandidateOrder,
    ) -> List[Dict]:
        query = self._client.table(CONTENT_TABLE).select(CONTENT_COLUMNS).eq("is_active", True)
        if exclude_ids:
            query = query.not_.in_("id", exclude_ids)
        response = query.order(order_by.value, desc=True).limit(limit).execute()
        return response.data or []

    async def fetch_candidates(
        self,
        exclude_ids: Sequence[str],
        preferred_topics: Sequence[str],
        limit: int,
        order_by: CandidateOrder = CandidateOrder.RECENCY,
    ) -> List[Dict]:
        rows = await self._run(
            "fetch_candidates", self._query_candidates, list(exclude_ids), limit, order_by
        )
        logger.debug("[supabase_store] fetch_candidates returned %d rows", len(rows))
        return rows

    def _query_skipped_ids(self, user_id: str) -> List[str]:
        response = (
            self._client.table(INTERACTIONS_TABLE)
            .select("content_id")
            .eq("user_id", user_id)
            .eq("type", SKIP_INTERACTION)
            .order("created_at", desc=True)
            .execute()
        )
        return [row["content_id"] for row in response.data or [] if row.get("content_id")]

    async def fetch_skipped_ids(self, user_id: str) -> List[str]:
        return await self._run("fetch_skipped_ids", self._query_skipped_ids, user_id)

    def _query_reputations(self, domains: List[str]) -> Dict[str, float]:
        response = (
            self._client.table(REPUTATION_TABLE)
            .select("domain, score")
            .in_("domain", domains)
            .execute()
        )
        reputations: Dict[str, float] = {}
        for row in response.data or []:
            if row.get("domain") and row.get("score") is not None:
                reputations[row["domain"]] = max(0.0, min(1.0, float(row["score"])))
        return reputations

    async def fetch_domain_reputations(self, domains: Sequence[str]) -> Dict[str, float]:
        if not domains:
            return {}
        return await self._run("fetch_domain_reputations", self._query_reputations, list(domains))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _insert(self, table: str, row: Dict) -> None:
        self._client.table(table).insert(row).execute()

    async def record_skip(self, user_id: str, content_id: str) -> None:
        await self._run(
            "record_skip",
            self._insert,
            INTERACTIONS_TABLE,
            {"user_id": user_id, "content_id": content_id, "type": SKIP_INTERACTION},
        )

    async def record_discovery_event(
        self,
        user_id: str,
        content_id: str,
        wildness: int,
        score: float,
        rank: int,
        algorithm_version: str,
    ) -> None:
        await self._run(
            "record_discovery_event",
            self._insert,
            EVENTS_TABLE,
            {
                "user_id": user_id,
                "content_id": content_id,
                "algorithm_version": algorithm_version,
                "wildness_setting": wildness,
                "final_score": score,
                "rank_in_results": rank,
            },
        )
