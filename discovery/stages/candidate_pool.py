"""
Candidate Fetcher: bounded, exclusion-safe candidate superset.

Resolves the user's skip history and queries storage for a superset of active
content concurrently, excluding seen and skipped ids at the query level (up to a
tunable ceiling of the most recent ids). The superset is post-filtered against the
complete exclusion set and blocked domains, then pre-sorted by topic match so that
domain capping does not crowd out topical items.

The public entry point is fetch_candidate_pool.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from ..errors import TRANSIENT_STORAGE_ERRORS
from ..models.config import DiscoveryConfig
from ..models.content import ContentItem
from ..store import CandidateOrder, DiscoveryStore

logger = logging.getLogger(__name__)

# Rotation between sort keys, indexed by session seed parity.
_ROTATION = (CandidateOrder.RECENCY, CandidateOrder.QUALITY)


@dataclass
class CandidatePool:
    """Output of the fetcher. ordered is the pre-diversity pool."""

    fetched: List[ContentItem]
    ordered: List[ContentItem]
    exclusion_ids: List[str]
    skipped_ids: List[str]
    order_by: CandidateOrder
    refetched: bool = False
    storage_failures: List[str] = field(default_factory=list)


def build_exclusion_list(
    session_seen_ids: Sequence[str],
    skipped_ids: Sequence[str],
) -> List[str]:
    """
    Exclusion ids, most recent first, without duplicates.

    Session ids arrive oldest first (appended as the session progresses) and are
    reversed; skipped ids arrive newest first from storage and follow them.
    """
    seen = set()
    ordered: List[str] = []
    for content_id in list(reversed(list(session_seen_ids))) + list(skipped_ids):
        if content_id and content_id not in seen:
            seen.add(content_id)
            ordered.append(content_id)
    return ordered


def query_exclusions(exclusion_ids: List[str], config: DiscoveryConfig) -> List[str]:
    """The most recent exclusions, bounded so the storage query cost stays flat."""
    return exclusion_ids[: config.max_query_exclusions]


def superset_limit(exclusion_ids: List[str], config: DiscoveryConfig) -> int:
    """Superset size, widened by the exclusions left to the in-process filter."""
    overflow = max(0, len(exclusion_ids) - config.max_query_exclusions)
    return min(config.superset_fetch_limit + overflow, config.max_superset_fetch_limit)


def rotation_order(seed: int) -> CandidateOrder:
    """Alternate the superset sort key across session windows to avoid a single stale ordering."""
    return _ROTATION[seed % len(_ROTATION)]


def presort_by_topics(
    items: List[ContentItem],
    preferred_topics: Sequence[str],
) -> List[ContentItem]:
    """Stable sort by number of matching preferred topics (most first); ties keep storage order."""
    if not preferred_topics:
        return list(items)
    preferred = list(preferred_topics)
    return sorted(items, key=lambda item: len(item.matching_topics(preferred)), reverse=True)


def rows_to_items(rows: Sequence[Any]) -> List[ContentItem]:
    """Convert storage rows to ContentItems, dropping rows that cannot be read (no id)."""
    items: List[ContentItem] = []
    for row in rows or []:
        if isinstance(row, ContentItem):
            items.append(row)
            continue
        try:
            items.append(ContentItem.model_validate(row))
        except ValidationError as e:
            logger.warning("[candidate_pool] MALFORMED_ROW dropped: %s", e.errors()[:1])
    return items


def _eligible(
    items: List[ContentItem],
    excluded: set,
    blocked_domains: Sequence[str],
) -> List[ContentItem]:
    """Drop excluded ids, blocked domains, and duplicate rows."""
    blocked = set(blocked_domains)
    seen_ids = set()
    eligible = []
    for item in items:
        if item.id in excluded or item.id in seen_ids:
            continue
        if item.domain in blocked:
            continue
        seen_ids.add(item.id)
        eligible.append(item)
    return eligible


def _resolve(result: Any, operation: str, failures: List[str]) -> Optional[Any]:
    """Unwrap a gather() result; transient storage failures degrade to None."""
    if isinstance(result, TRANSIENT_STORAGE_ERRORS):
        logger.warning("[candidate_pool] STORAGE_FAILURE %s: %s", operation, result)
        failures.append(operation)
        return None
    if isinstance(result, BaseException):
        raise result
    return result


async def fetch_candidate_pool(
    store: DiscoveryStore,
    user_id: str,
    session_seen_ids: Sequence[str],
    preferred_topics: Sequence[str],
    blocked_domains: Sequence[str],
    seed: int,
    config: DiscoveryConfig,
) -> CandidatePool:
    """
    Fetch the candidate superset for one request.

    Skip history and the superset query are issued concurrently. The first query
    excludes only session ids; if it returns any skipped id, the query is repeated
    with the full exclusion list so skipped content is excluded by storage itself.
    """
    order_by = rotation_order(seed)
    failures: List[str] = []
    session_exclusions = build_exclusion_list(session_seen_ids, [])

    skipped_result, rows_result = await asyncio.gather(
        store.fetch_skipped_ids(user_id),
        store.fetch_candidates(
            query_exclusions(session_exclusions, config),
            list(preferred_topics),
            superset_limit(session_exclusions, config),
            order_by,
        ),
        return_exceptions=True,
    )
    skipped_ids: List[str] = list(_resolve(skipped_result, "fetch_skipped_ids", failures) or [])
    items = rows_to_items(_resolve(rows_result, "fetch_candidates", failures) or [])

    exclusion_ids = build_exclusion_list(session_seen_ids, skipped_ids)
    skipped = set(skipped_ids)
    refetched = False
    if skipped and any(item.id in skipped for item in items):
        logger.info(
            "[candidate_pool] SKIPPED_IN_SUPERSET refetching with %d query exclusions",
            len(query_exclusions(exclusion_ids, config)),
        )
        try:
            rows = await store.fetch_candidates(
                query_exclusions(exclusion_ids, config),
                list(preferred_topics),
                superset_limit(exclusion_ids, config),
                order_by,
            )
            items = rows_to_items(rows)
            refetched = True
        except TRANSIENT_STORAGE_ERRORS as e:
            # The in-process filter below still removes every skipped id.
            logger.warning("[candidate_pool] STORAGE_FAILURE fetch_candidates (refetch): %s", e)
            failures.append("fetch_candidates")

    eligible = _eligible(items, set(exclusion_ids), blocked_domains)
    ordered = presort_by_topics(eligible, preferred_topics)
    logger.info(
        "[candidate_pool] user=%s order_by=%s superset=%d eligible=%d exclusions=%d skipped=%d",
        user_id, order_by.value, len(items), len(eligible), len(exclusion_ids), len(skipped_ids),
    )
    return CandidatePool(
        fetched=eligible,
        ordered=ordered,
        exclusion_ids=exclusion_ids,
        skipped_ids=skipped_ids,
        order_by=order_by,
        refetched=refetched,
        storage_failures=failures,
    )
