"""
Pipeline orchestrator — fetch, diversify, score, and select one item.

The main entry point is select_next, which runs the Candidate Fetcher, the Domain
Diversity Filter, the Scorer, and the Selector in order and returns a
SelectionResult (or NoContentAvailable when every eligible item is excluded).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from ..errors import TRANSIENT_STORAGE_ERRORS
from ..models.config import DiscoveryConfig, resolve_config
from ..models.content import ContentItem
from ..models.preferences import UserPreferences
from ..models.scoring import unscored
from ..models.selection import NoContentAvailable, SelectionOutcome, SelectionResult
from ..store import DiscoveryStore
from ..utils.seeds import request_rng, session_seed, session_window
from .candidate_pool import fetch_candidate_pool
from .domain_diversity import apply_domain_diversity
from .scoring import build_rationale, score_candidates
from .selector import select_candidate

logger = logging.getLogger(__name__)


async def _lookup_reputations(
    store: DiscoveryStore,
    domains: Iterable[str],
) -> Dict[str, float]:
    """
    Reputation per domain, fetched in one batch.

    Unknown domains are left out of the map, and a transient failure yields an
    empty map, so scoring applies the neutral default.
    """
    unique = sorted(set(domains))
    if not unique:
        return {}
    try:
        found = await store.fetch_domain_reputations(unique)
    except TRANSIENT_STORAGE_ERRORS as e:
        logger.warning(
            "[reputation] STORAGE_FAILURE %d domains: %s; using default reputation",
            len(unique), e,
        )
        return {}
    wanted = set(unique)
    reputations = {
        domain: score for domain, score in (found or {}).items()
        if domain in wanted and score is not None
    }
    logger.debug("[reputation] %d/%d domains known", len(reputations), len(unique))
    return reputations


async def select_next(
    store: DiscoveryStore,
    user_id: str,
    wildness: int,
    session_seen_ids: Sequence[str],
    preferred_topics: Sequence[str],
    blocked_domains: Optional[Sequence[str]] = None,
    config: Optional[DiscoveryConfig] = None,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> SelectionOutcome:
    """
    Select the next item to show.

    Args:
        store: storage collaborator for candidates, skips, and reputation.
        user_id: caller identity; skip history is keyed by it.
        wildness: exploration setting, clamped to 0..100.
        session_seen_ids: ids already shown this session, oldest first.
        preferred_topics: topic names the user follows (may be empty).
        blocked_domains: domains that must never be selected.
        config: engine tuning; DEFAULT_CONFIG when None.
        seed: pins the session seed and the request RNG (reproducible selection). When
            None the seed is derived from user_id and the session window, and the
            scoring jitter and weighted draw use fresh entropy.
        now: reference time for decay terms and the session window.

    Returns:
        SelectionResult with the chosen item, or NoContentAvailable.
    """
    config = resolve_config(config)
    now = now or datetime.now(timezone.utc)
    session_seen_ids = [i for i in session_seen_ids if i]
    preferences = UserPreferences(
        user_id=user_id,
        preferred_topics=[t for t in preferred_topics if t],
        wildness=wildness,
        blocked_domains=list(blocked_domains or []),
    )
    # A pinned seed makes the whole request reproducible; otherwise only the
    # sort rotation follows the session seed and the draws use fresh entropy.
    rng = request_rng(seed, session_seen_ids)
    if seed is None:
        seed = session_seed(user_id, session_window(now, config.session_window_minutes))

    # 1) Candidate superset, exclusion-filtered and topic pre-sorted
    pool = await fetch_candidate_pool(
        store,
        user_id,
        session_seen_ids,
        preferences.preferred_topics,
        preferences.blocked_domains,
        seed,
        config,
    )

    # 2) Per-domain cap
    diversity = apply_domain_diversity(pool.ordered, config)

    # 3) Reputation for every domain that can still be scored
    reputations = await _lookup_reputations(store, (item.domain for item in diversity.items))

    def _score(items: List[ContentItem]):
        return score_candidates(items, preferences, reputations, rng, config, now)

    # 4) Selection over the first non-empty pool
    selection = select_candidate(
        [
            ("post_diversity_pool", lambda: _score(diversity.items)),
            ("pre_diversity_pool", lambda: _score(pool.ordered[: config.candidate_pool_size])),
            ("fetched_pool", lambda: unscored(pool.fetched)),
        ],
        rng,
    )
    fallbacks = [f"storage:{name}" for name in pool.storage_failures] + selection.fallbacks

    chosen = selection.candidate
    if chosen is None or chosen.content is None:
        logger.info(
            "[orchestrator] NO_CONTENT user=%s seen=%d skipped=%d",
            user_id, len(session_seen_ids), len(pool.skipped_ids),
        )
        return NoContentAvailable(seen_ids=list(session_seen_ids), fallbacks=fallbacks)

    rationale = build_rationale(chosen, preferences, config)
    logger.info(
        "[orchestrator] user=%s selected=%s domain=%s score=%.4f strategy=%s pool=%d",
        user_id, chosen.content.id, chosen.content.domain, chosen.score,
        selection.strategy, len(selection.pool),
    )
    return SelectionResult(
        content=chosen.content,
        rationale=rationale,
        score=chosen.score,
        score_breakdown=chosen.breakdown,
        seen_ids=list(session_seen_ids) + [chosen.content.id],
        pool_size=len(selection.pool),
        domain_cap=diversity.cap,
        domain_cap_relaxed=diversity.relaxed,
        fallbacks=fallbacks,
        strategy=selection.strategy or "",
        rank=selection.rank,
    )
