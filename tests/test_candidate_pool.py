"""
Candidate Fetcher Tests

Test Scenarios:
---------------
1. Exclusion list ordering (most recent first) and query-level ceiling
2. Superset limit widened by overflowed exclusions, bounded by the hard ceiling
3. Skipped and seen ids never reach the pool, even past the query ceiling
4. Refetch when the optimistic superset contained a skipped id
5. Transient storage failures degrade to partial data
"""

import asyncio

import pytest

from discovery.errors import StorageError
from discovery.models.config import DiscoveryConfig
from discovery.models.content import ContentItem
from discovery.stages.candidate_pool import (
    build_exclusion_list,
    fetch_candidate_pool,
    presort_by_topics,
    query_exclusions,
    rotation_order,
    rows_to_items,
    superset_limit,
)
from discovery.store import CandidateOrder
from server.services import InMemoryDiscoveryStore


class RecordingStore(InMemoryDiscoveryStore):
    """In-memory store that records every candidate query."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.queries = []

    async def fetch_candidates(self, exclude_ids, preferred_topics, limit, order_by=CandidateOrder.RECENCY):
        self.queries.append({"exclude_ids": list(exclude_ids), "limit": limit, "order_by": order_by})
        return await super().fetch_candidates(exclude_ids, preferred_topics, limit, order_by)


class SkipHistoryDownStore(InMemoryDiscoveryStore):
    async def fetch_skipped_ids(self, user_id):
        raise StorageError("user_interactions unavailable")


class CandidatesDownStore(InMemoryDiscoveryStore):
    async def fetch_candidates(self, exclude_ids, preferred_topics, limit, order_by=CandidateOrder.RECENCY):
        raise StorageError("content unavailable")


def _fetch(store, seen=(), topics=(), blocked=(), seed=0, config=None):
    return asyncio.run(
        fetch_candidate_pool(store, "user-1", list(seen), list(topics), list(blocked), seed, config or DiscoveryConfig())
    )


class TestExclusionHelpers:
    def test_build_exclusion_list_most_recent_first(self):
        assert build_exclusion_list(["a", "b", "c"], ["x", "b"]) == ["c", "b", "a", "x"]

    def test_query_exclusions_ceiling(self):
        config = DiscoveryConfig(max_query_exclusions=2)
        assert query_exclusions(["c", "b", "a", "x"], config) == ["c", "b"]

    def test_superset_limit(self):
        config = DiscoveryConfig(max_query_exclusions=2, superset_fetch_limit=10, max_superset_fetch_limit=12)
        assert superset_limit(["a"], config) == 10
        assert superset_limit(["a", "b", "c", "d"], config) == 12
        assert superset_limit([str(i) for i in range(10)], config) == 12

    def test_rotation_alternates(self):
        assert rotation_order(0) == CandidateOrder.RECENCY
        assert rotation_order(1) == CandidateOrder.QUALITY

    def test_presort_is_stable(self, make_item):
        items = [
            ContentItem.model_validate(make_item("a", topics=["music"])),
            ContentItem.model_validate(make_item("b", topics=["science"])),
            ContentItem.model_validate(make_item("c", topics=["science", "design"])),
            ContentItem.model_validate(make_item("d", topics=["science"])),
        ]
        ordered = presort_by_topics(items, ["science", "design"])
        assert [i.id for i in ordered] == ["c", "b", "d", "a"]

    def test_rows_without_id_are_dropped(self):
        items = rows_to_items([{"id": "ok", "topics": None}, {"title": "no id"}, None])
        assert [i.id for i in items] == ["ok"]
        assert items[0].topics == []

    def test_null_text_columns_keep_the_row(self):
        items = rows_to_items([
            {"id": "x", "url": "https://www.Example.com/x", "domain": None},
            {"id": "y", "url": "https://example.org/y", "title": None, "description": None},
            {"id": "z", "url": None, "domain": None, "reading_time_minutes": 4.6},
            {"id": 7, "topics": "ai", "quality_score": "0.8", "trending_score": "n/a"},
        ])
        assert [i.id for i in items] == ["x", "y", "z", "7"]
        assert items[0].domain == "example.com"
        assert items[1].title == ""
        assert items[1].domain == "example.org"
        assert items[2].domain == "unknown"
        assert items[2].reading_time_minutes == 5
        assert items[3].topics == ["ai"]
        assert items[3].quality_score == 0.8
        assert items[3].trending_score is None


class TestFetchCandidatePool:
    def test_seen_and_skipped_are_excluded(self, catalog):
        store = RecordingStore(items=catalog)
        asyncio.run(store.record_skip("user-1", "item-0"))

        pool = _fetch(store, seen=["item-1", "item-2"])

        ids = {item.id for item in pool.fetched}
        assert not ids & {"item-0", "item-1", "item-2"}
        assert len(ids) == 57
        assert pool.skipped_ids == ["item-0"]

    def test_refetch_when_skipped_item_in_superset(self, catalog):
        store = RecordingStore(items=catalog)
        asyncio.run(store.record_skip("user-1", "item-0"))

        pool = _fetch(store, seen=["item-1"], seed=0)

        assert pool.refetched is True
        assert len(store.queries) == 2
        assert store.queries[0]["exclude_ids"] == ["item-1"]
        assert store.queries[1]["exclude_ids"] == ["item-1", "item-0"]

    def test_no_refetch_without_skips(self, catalog):
        store = RecordingStore(items=catalog)
        pool = _fetch(store, seen=["item-1"])
        assert pool.refetched is False
        assert len(store.queries) == 1

    def test_exclusions_past_query_ceiling_still_enforced(self, catalog):
        store = RecordingStore(items=catalog)
        config = DiscoveryConfig(max_query_exclusions=5)
        seen = [f"item-{i}" for i in range(30)]

        pool = _fetch(store, seen=seen, config=config)

        assert store.queries[0]["exclude_ids"] == [f"item-{i}" for i in range(29, 24, -1)]
        assert store.queries[0]["limit"] == config.superset_fetch_limit + 25
        assert {item.id for item in pool.fetched} == {f"item-{i}" for i in range(30, 60)}

    def test_blocked_domains_filtered(self, store):
        pool = _fetch(store, blocked=["alpha.com"])
        assert pool.fetched
        assert all(item.domain != "alpha.com" for item in pool.fetched)

    def test_order_follows_seed_parity(self, catalog):
        store = RecordingStore(items=catalog)
        assert _fetch(store, seed=3).order_by == CandidateOrder.QUALITY
        assert store.queries[-1]["order_by"] == CandidateOrder.QUALITY

    def test_topic_presort(self, store):
        pool = _fetch(store, topics=["music"])
        assert all("music" in item.topics for item in pool.ordered[:15])

    def test_skip_history_failure_degrades(self, catalog):
        store = SkipHistoryDownStore(items=catalog)
        pool = _fetch(store, seen=["item-5"])
        assert pool.storage_failures == ["fetch_skipped_ids"]
        assert len(pool.fetched) == 59

    def test_candidate_failure_degrades_to_empty(self, catalog):
        store = CandidatesDownStore(items=catalog)
        pool = _fetch(store)
        assert pool.fetched == []
        assert "fetch_candidates" in pool.storage_failures

    def test_unexpected_errors_propagate(self, catalog):
        class BrokenStore(InMemoryDiscoveryStore):
            async def fetch_skipped_ids(self, user_id):
                raise KeyError("bug")

        with pytest.raises(KeyError):
            _fetch(BrokenStore(items=catalog))
