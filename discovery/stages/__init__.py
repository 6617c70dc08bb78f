"""Pipeline stages: candidate pool, domain diversity, scoring, selection, orchestration."""

from .candidate_pool import CandidatePool, fetch_candidate_pool
from .domain_diversity import DiversityResult, apply_domain_diversity
from .orchestrator import select_next
from .scoring import build_rationale, score_candidates
from .selector import Selection, select_candidate

__all__ = [
    "CandidatePool",
    "DiversityResult",
    "Selection",
    "apply_domain_diversity",
    "build_rationale",
    "fetch_candidate_pool",
    "score_candidates",
    "select_candidate",
    "select_next",
]
