"""Shared fixtures: a fixed clock, a content row factory, a small catalog, and an in-memory store."""

from datetime import datetime, timedelta, timezone

import pytest

from server.services import InMemoryDiscoveryStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

DOMAINS = ["alpha.com", "beta.org", "gamma.io", "delta.net", "epsilon.dev", "zeta.blog"]
TOPICS = ["science", "design", "history", "music"]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    """Factory for content rows as storage returns them."""

    def _make(
        content_id,
        domain="example.com",
        topics=None,
        quality=0.7,
        age_hours=24.0,
        trending=None,
        **extra,
    ):
        row = {
            "id": content_id,
            "url": f"https://{domain}/{content_id}",
            "title": f"Item {content_id}",
            "domain": domain,
            "topics": topics or [],
            "quality_score": quality,
            "trending_score": trending,
            "created_at": (NOW - timedelta(hours=age_hours)).isoformat(),
        }
        row.update(extra)
        return row

    return _make


@pytest.fixture
def catalog(make_item):
    """60 rows spread evenly over 6 domains and 4 topics."""
    return [
        make_item(
            f"item-{i}",
            domain=DOMAINS[i % len(DOMAINS)],
            topics=[TOPICS[i % len(TOPICS)]],
            quality=0.4 + (i % 5) * 0.1,
            age_hours=6.0 + i,
        )
        for i in range(60)
    ]


@pytest.fixture
def store(catalog):
    return InMemoryDiscoveryStore(items=catalog)
