"""
In-memory Discovery Store.

Holds the catalog, skip history, domain reputation, and discovery events in
process. Used for tests and local runs (optionally seeded from a JSON file).
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from discovery.errors import ConfigError
from discovery.store import CandidateOrder

logger = logging.getLogger(__name__)


def _sort_key(row: Dict, order_by: CandidateOrder):
    value = row.get(order_by.value)
    # Rows without the sort field go last.
    return (value is not None, value if value is not None else "")


class InMemoryDiscoveryStore:
    """
    DiscoveryStore backed by plain dicts.

    Rows are content dicts (id, url, title, topics, quality_score, created_at, ...);
    rows with is_active == False are never returned.
    """

    def __init__(
        self,
        items: Optional[List[Dict]] = None,
        reputations: Optional[Dict[str, float]] = None,
    ):
        self._items: List[Dict] = list(items or [])
        self._reputations: Dict[str, float] = dict(reputations or {})
        self._skips: Dict[str, List[str]] = {}
        self.events: List[Dict] = []

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryDiscoveryStore":
        """
        Load a catalog from JSON: either a list of content rows, or an object with
        "content" (rows) and optional "domain_reputation" (domain -> score).
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read content catalog {path}: {e}") from e
        if isinstance(data, list):
            store = cls(items=data)
        else:
            store = cls(
                items=data.get("content", []),
                reputations=data.get("domain_reputation", {}),
            )
        logger.info("[memory_store] Loaded %d content rows from %s", len(store._items), path)
        return store

    def add_items(self, items: Sequence[Dict]) -> None:
        self._items.extend(items)

    def set_reputation(self, domain: str, score: float) -> None:
        self._reputations[domain] = score

    async def fetch_candidates(
        self,
        exclude_ids: Sequence[str],
        preferred_topics: Sequence[str],
        limit: int,
        order_by: CandidateOrder = CandidateOrder.RECENCY,
    ) -> List[Dict]:
        excluded = set(exclude_ids)
        rows = [
            row for row in self._items
            if row.get("is_active", True) is not False and row.get("id") not in excluded
        ]
        rows.sort(key=lambda row: _sort_key(row, order_by), reverse=True)
        return [dict(row) for row in rows[:limit]]

    async def fetch_skipped_ids(self, user_id: str) -> List[str]:
        return list(reversed(self._skips.get(user_id, [])))

    async def fetch_domain_reputations(self, domains: Sequence[str]) -> Dict[str, float]:
        return {d: self._reputations[d] for d in domains if d in self._reputations}

    async def record_skip(self, user_id: str, content_id: str) -> None:
        skips = self._skips.setdefault(user_id, [])
        if content_id in skips:
            skips.remove(content_id)
        skips.append(content_id)

    async def record_discovery_event(
        self,
        user_id: str,
        content_id: str,
        wildness: int,
        score: float,
        rank: int,
        algorithm_version: str,
    ) -> None:
        self.events.append({
            "user_id": user_id,
            "content_id": content_id,
            "wildness": wildness,
            "score": score,
            "rank": rank,
            "algorithm_version": algorithm_version,
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
