"""
Discovery Selection API — FastAPI app factory.

Use: uvicorn server.app:app
Or:  from server import app
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .logging_util import setup_logging
from .routes import register_routes
from .state import AppState, get_state, set_state

logger = logging.getLogger(__name__)


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """
    Build FastAPI app with CORS and routes.

    The application state (engine config and store) is built here, so an invalid
    engine configuration stops the server before it serves any request.
    """
    config = state.config if state is not None else get_config()
    setup_logging(config.log_level)

    valid, errors = config.validate()
    for error in errors:
        logger.warning("[startup] %s", error)

    if state is not None:
        set_state(state)
    state = get_state()

    app = FastAPI(
        title="Discovery Selection API",
        description="Selects one next item per request from the content catalog",
        version="2.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    logger.info(
        "[startup] Discovery API ready: data_source=%s algorithm=%s timeout=%.1fs config_valid=%s",
        config.data_source, state.engine_config.algorithm_version,
        config.request_timeout_seconds, valid,
    )
    return app


app = create_app()
