"""Shared utilities for seeding and per-request randomness."""

from .seeds import request_rng, session_seed, session_window

__all__ = [
    "request_rng",
    "session_seed",
    "session_window",
]
