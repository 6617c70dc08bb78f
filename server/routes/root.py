"""Root and health endpoints."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()

API_VERSION = "2.1.0"


@router.get("/")
def root():
    state = get_state()
    return {
        "name": "Discovery Selection API",
        "version": API_VERSION,
        "status": "ready",
        "algorithm_version": state.engine_config.algorithm_version,
        "store": type(state.store).__name__,
        "endpoints": {
            "config": ["/api/config", "/api/config/computed"],
            "discovery": ["/api/discovery/next", "/api/discovery/skip"],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    return {
        "status": "healthy",
        "data_source": state.config.data_source,
        "store": type(state.store).__name__,
    }
