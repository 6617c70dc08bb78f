"""
Domain diversity: cap the number of candidates any single source domain contributes.

A bulk-imported domain with thousands of fresh pages would otherwise crowd every
other source out of the pool regardless of topic or quality.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from ..models.config import DiscoveryConfig
from ..models.content import ContentItem

logger = logging.getLogger(__name__)


@dataclass
class DiversityResult:
    items: List[ContentItem]
    cap: int
    relaxed: bool
    domain_counts: Dict[str, int]


def cap_per_domain(
    items: List[ContentItem],
    max_per_domain: int,
    pool_size: int,
) -> List[ContentItem]:
    """
    Keep at most max_per_domain items per domain, preserving order.

    Stops once pool_size items have been kept.
    """
    counts: Dict[str, int] = {}
    kept: List[ContentItem] = []
    for item in items:
        count = counts.get(item.domain, 0)
        if count >= max_per_domain:
            continue
        kept.append(item)
        counts[item.domain] = count + 1
        if len(kept) >= pool_size:
            break
    return kept


def relaxed_cap(items: List[ContentItem], config: DiscoveryConfig) -> int:
    """
    Smallest cap in the doubling sequence K, 2K, 4K, ... that yields a viable pool.

    Relaxation depends only on the diversity available: when the candidates span
    more than relax_max_domains domains the configured cap is returned unchanged.
    Otherwise doubling stops as soon as the pool reaches min_viable_pool_size (or
    pool size), or once the cap covers the largest domain.
    """
    cap = config.max_per_domain
    if not items:
        return cap
    domain_counts = Counter(item.domain for item in items)
    if len(domain_counts) > config.relax_max_domains:
        return cap
    largest_domain = max(domain_counts.values())
    target = min(config.min_viable_pool_size, config.candidate_pool_size)
    while cap < largest_domain:
        pool = cap_per_domain(items, cap, config.candidate_pool_size)
        if len(pool) >= target:
            break
        cap *= 2
    return cap


def apply_domain_diversity(
    items: List[ContentItem],
    config: DiscoveryConfig,
) -> DiversityResult:
    """Cap items per domain, relaxing the cap when the pool would be too small."""
    cap = relaxed_cap(items, config)
    diverse = cap_per_domain(items, cap, config.candidate_pool_size)
    domain_counts = dict(Counter(item.domain for item in diverse))
    relaxed = cap > config.max_per_domain
    if relaxed:
        logger.warning(
            "[diversity] CAP_RELAXED configured=%d effective=%d pool=%d min_viable=%d",
            config.max_per_domain, cap, len(diverse), config.min_viable_pool_size,
        )
    logger.debug(
        "[diversity] %d unique domains in %d candidates (cap=%d)",
        len(domain_counts), len(diverse), cap,
    )
    return DiversityResult(items=diverse, cap=cap, relaxed=relaxed, domain_counts=domain_counts)
