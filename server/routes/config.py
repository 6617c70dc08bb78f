"""Configuration endpoints: active engine config and derived parameters."""

from typing import Optional

from fastapi import APIRouter, Query

from discovery import compute_parameters

from ..state import get_state

router = APIRouter()


@router.get("")
def get_engine_config():
    """Active engine configuration plus its computed parameters."""
    state = get_state()
    engine_config = state.engine_config
    return {
        "algorithm_version": engine_config.algorithm_version,
        "data_source": state.config.data_source,
        "config": engine_config.model_dump(mode="json"),
        "computed": compute_parameters(engine_config),
    }


@router.get("/computed")
def get_computed_parameters(
    wildness: Optional[int] = Query(None, description="Wildness setting (0-100)"),
):
    """Computed parameters, optionally including the values in effect at a wildness setting."""
    state = get_state()
    return compute_parameters(state.engine_config, wildness=wildness)
