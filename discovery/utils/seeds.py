"""
Session seed helpers: deterministic shuffle keys derived from the user and a time bucket.

The session seed is consistent within a session window and differs across windows
and users; it keys the candidate sort rotation. Per-request randomness (scoring
jitter and the weighted draw) comes from fresh entropy unless a seed is pinned.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np


def session_window(now: Optional[datetime] = None, minutes: int = 60) -> int:
    """Index of the time bucket containing now (buckets of the given length since the epoch)."""
    now = now or datetime.now(timezone.utc)
    return int(now.timestamp() // (minutes * 60))


def session_seed(user_id: str, window: int) -> int:
    """Stable 64-bit seed for (user_id, window)."""
    digest = hashlib.sha256(f"{user_id}:{window}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def request_rng(seed: Optional[int], session_seen_ids: Sequence[str]) -> np.random.Generator:
    """
    RNG for one request.

    A pinned seed plus the position within the session gives a reproducible draw;
    with no seed the generator takes fresh OS entropy, so independent sessions differ.
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng([seed, len(session_seen_ids)])
