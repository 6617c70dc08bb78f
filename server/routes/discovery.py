"""Discovery endpoints: next item and permanent skips."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from discovery import NoContentAvailable, select_next
from discovery.errors import TRANSIENT_STORAGE_ERRORS

from ..models import NextRequest, NextResponse, SelectionDebugInfo, SkipRequest, SkipResponse
from ..state import get_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/next", response_model=NextResponse)
async def next_discovery(request: NextRequest):
    """Select the next item for the user; an exhausted catalog is a normal 200 response."""
    state = get_state()
    engine_config = state.engine_config
    try:
        outcome = await asyncio.wait_for(
            select_next(
                state.store,
                request.user_id,
                request.wildness,
                request.seen_ids,
                request.preferred_topics,
                blocked_domains=request.blocked_domains,
                config=engine_config,
            ),
            timeout=state.config.request_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(
            "[discovery] DEADLINE_EXCEEDED user=%s after %.1fs",
            request.user_id, state.config.request_timeout_seconds,
        )
        raise HTTPException(status_code=504, detail="Discovery selection timed out")

    if isinstance(outcome, NoContentAvailable):
        return NextResponse(
            seen_ids=outcome.seen_ids,
            exhausted=True,
            message=outcome.reason,
            debug=SelectionDebugInfo(
                fallbacks=outcome.fallbacks,
                algorithm_version=engine_config.algorithm_version,
            ),
        )

    try:
        await state.store.record_discovery_event(
            request.user_id,
            outcome.content.id,
            request.wildness,
            outcome.score,
            outcome.rank,
            engine_config.algorithm_version,
        )
    except TRANSIENT_STORAGE_ERRORS as e:
        logger.warning("[discovery] EVENT_NOT_RECORDED content=%s: %s", outcome.content.id, e)

    return NextResponse(
        content=outcome.content,
        rationale=outcome.rationale,
        score=outcome.score,
        score_breakdown=outcome.score_breakdown,
        seen_ids=outcome.seen_ids,
        debug=SelectionDebugInfo(
            pool_size=outcome.pool_size,
            domain_cap=outcome.domain_cap,
            domain_cap_relaxed=outcome.domain_cap_relaxed,
            strategy=outcome.strategy,
            fallbacks=outcome.fallbacks,
            rank=outcome.rank,
            algorithm_version=engine_config.algorithm_version,
        ),
    )


@router.post("/skip", response_model=SkipResponse)
async def skip_content(request: SkipRequest):
    """Record a permanent skip; the item is excluded from all future selections for the user."""
    state = get_state()
    try:
        await state.store.record_skip(request.user_id, request.content_id)
    except TRANSIENT_STORAGE_ERRORS as e:
        logger.error("[discovery] SKIP_NOT_RECORDED user=%s content=%s: %s", request.user_id, request.content_id, e)
        raise HTTPException(status_code=503, detail="Skip could not be recorded, try again")
    return SkipResponse(user_id=request.user_id, content_id=request.content_id)
