"""
Human-readable rationale for a selection, chosen by the dominant score term.

Trending is only mentioned when the trending term actually dominated the score.
"""

from ...models.config import DiscoveryConfig, TrendingWindow
from ...models.preferences import UserPreferences
from ...models.scoring import ScoredCandidate

TRENDING_PHRASES = {
    TrendingWindow.HOUR: "Trending right now",
    TrendingWindow.DAY: "Trending today",
    TrendingWindow.WEEK: "Trending this week",
}


def _topic_phrase(topics: list[str]) -> str:
    return " and ".join(topics[:2])


def build_rationale(
    candidate: ScoredCandidate,
    preferences: UserPreferences,
    config: DiscoveryConfig,
) -> str:
    """
    Short explanation for why candidate was picked.

    Leads with the dominant term; appends the topic match as a second clause when a
    preferred topic matched but another term dominated.
    """
    term = candidate.dominant_term
    topics = candidate.matched_topics

    if term == "topic_match" and topics:
        return f"Matches your interest in {_topic_phrase(topics)}"

    if term == "trending":
        primary = TRENDING_PHRASES[config.trending_window]
    elif term == "freshness":
        primary = "Fresh content to explore"
    elif term == "quality":
        primary = "Curated high-quality content"
    elif term == "randomness":
        if preferences.wildness > config.high_wildness_threshold:
            primary = "Serendipitous discovery - time to explore something new"
        else:
            primary = "Something a little different to explore"
    else:
        primary = "Recommended content to discover"

    if topics:
        return f"{primary}; matches your interest in {_topic_phrase(topics)}"
    return primary
